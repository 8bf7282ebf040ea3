"""
Tests related to the execution of the secondary and the primary build
"""
import unittest
from unittest import mock

from mocha.build.builder import Builder
from mocha.package.errors import ProcessExitError
from mocha.utils.settings import Settings


class TestBuilder(unittest.TestCase):

    def setUp(self):
        Settings().reset()
        self.builder = Builder("/src/zstd", ["zstd", "lz4"])

    def tearDown(self):
        Settings().reset()

    def test_secondary_build_cmd(self):
        self.assertEqual(["zig", "build", "-Doptimize=ReleaseFast", "-Dtarget=x86_64-linux-musl"],
                         self.builder.secondary_build_cmd())

    def test_primary_build_cmd(self):
        self.assertEqual(["cargo", "+nightly", "zigbuild", "--features=zstd,lz4", "--no-default-features",
                          "--target=x86_64-unknown-linux-musl", "--release"],
                         self.builder.primary_build_cmd())

    def test_primary_build_cmd_without_features(self):
        self.assertIn("--features=", Builder("/src/tool").primary_build_cmd())

    def test_commands_from_settings(self):
        Settings()["build/primary/toolchain"] = "stable"
        Settings()["build/secondary/optimize"] = "ReleaseSmall"
        self.assertEqual("+stable", self.builder.primary_build_cmd()[1])
        self.assertEqual("-Doptimize=ReleaseSmall", self.builder.secondary_build_cmd()[2])

    def test_build_order(self):
        with mock.patch("mocha.build.builder.exec_command") as exec_command:
            self.assertGreaterEqual(self.builder.build(), 0)
        self.assertEqual([mock.call(self.builder.secondary_build_cmd(), cwd="/src/zstd"),
                          mock.call(self.builder.primary_build_cmd(), cwd="/src/zstd")],
                         exec_command.call_args_list)

    def test_failing_secondary_build_stops(self):
        error = ProcessExitError(self.builder.secondary_build_cmd(), "/src/zstd", 2)
        with mock.patch("mocha.build.builder.exec_command", side_effect=error) as exec_command:
            with self.assertRaises(ProcessExitError) as context:
                self.builder.build()
        self.assertEqual(2, context.exception.return_code)
        self.assertEqual(1, exec_command.call_count)

    def test_invalid_features(self):
        with self.assertRaises(TypeError):
            Builder("/src/zstd", [1])
