import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "installers" / "bootstrap"))
sys.path.insert(0, str(ROOT / "packages" / "core"))

from terminal_anywhere_bootstrap.platforms import PlatformTag
from terminal_anywhere_bootstrap.resolver import OriginKind, ReleaseSource, resolve


class SourceResolverTests(unittest.TestCase):
    def test_latest_release_then_raw(self):
        plan = resolve(PlatformTag.LINUX_X64, None, "terminal_anywhere_client")
        self.assertEqual(
            plan.urls(),
            [
                "https://github.com/scantrancher/terminal-anywhere/releases/latest/download/terminal_anywhere_client-linux-x64",
                "https://raw.githubusercontent.com/scantrancher/terminal-anywhere/main/latest/terminal_anywhere_client-linux-x64",
            ],
        )

    def test_pinned_release_embeds_tag(self):
        plan = resolve(PlatformTag.MACOS_ARM64, "v1.24.4", "terminal_anywhere_server")
        first = next(iter(plan))
        self.assertEqual(first.origin, OriginKind.PRIMARY_RELEASE)
        self.assertEqual(
            first.url,
            "https://github.com/scantrancher/terminal-anywhere/releases/download/v1.24.4/terminal_anywhere_server-macos-arm64",
        )

    def test_raw_fallback_always_last(self):
        source = ReleaseSource(mirror_url="https://mirror.example/ta/")
        for tag in (PlatformTag.LINUX_X64, PlatformTag.MACOS_X64, PlatformTag.MACOS_ARM64):
            for pin in (None, "v2.0.0"):
                with self.subTest(tag=tag, pin=pin):
                    candidates = list(resolve(tag, pin, "terminal_anywhere_client", source))
                    self.assertTrue(candidates)
                    self.assertEqual(candidates[-1].origin, OriginKind.RAW_FALLBACK)
                    self.assertTrue(candidates[-1].url.startswith("https://raw.githubusercontent.com/"))

    def test_mirror_sits_between_primary_and_raw(self):
        source = ReleaseSource(mirror_url="https://mirror.example/ta/")
        plan = resolve(PlatformTag.LINUX_X64, "v2.0.0", "terminal_anywhere_client", source)
        origins = [c.origin for c in plan]
        self.assertEqual(origins, [OriginKind.PRIMARY_RELEASE, OriginKind.MIRROR, OriginKind.RAW_FALLBACK])
        self.assertEqual(
            plan.urls()[1],
            "https://mirror.example/ta/v2.0.0/terminal_anywhere_client-linux-x64",
        )

    def test_sequence_is_restartable(self):
        plan = resolve(PlatformTag.LINUX_X64, None, "terminal_anywhere_client")
        self.assertEqual(list(plan), list(plan))

    def test_unsupported_platform_is_refused(self):
        with self.assertRaises(ValueError):
            resolve(PlatformTag.UNSUPPORTED, None, "terminal_anywhere_client")


if __name__ == "__main__":
    unittest.main()
