"""Tests for unified bundle creation."""

import pytest

from xcpack.build.bundle_wrapper import BundleWrapper, WrapFailure


@pytest.fixture
def wrapper(layout, fake_runner):
    return BundleWrapper(layout.output, runner=fake_runner)


class TestBundleWrapper:
    """Test each wrapping mode and failure cleanup."""

    def test_from_built_variants(self, wrapper, fake_runner, layout, tmp_path):
        frameworks = [
            tmp_path / "build" / "maccatalyst" / "Release" / "ParsecSDK.framework",
            tmp_path / "build" / "macos" / "Release" / "ParsecSDK.framework",
        ]

        bundle = wrapper.from_built_variants(frameworks)

        assert bundle == layout.output
        assert (bundle / "Info.plist").exists()
        cmd = fake_runner.wraps[0]
        assert cmd[:2] == ["xcodebuild", "-create-xcframework"]
        assert cmd.count("-framework") == 2
        assert cmd[-2:] == ["-output", str(wrapper.staging_dir / "ParsecSDK.xcframework")]
        assert not wrapper.staging_dir.exists()

    def test_from_built_variants_is_order_independent(self, layout, fake_runner, tmp_path):
        a = tmp_path / "a" / "ParsecSDK.framework"
        b = tmp_path / "b" / "ParsecSDK.framework"

        BundleWrapper(layout.output, runner=fake_runner).from_built_variants([b, a])
        BundleWrapper(layout.output, runner=fake_runner).from_built_variants([a, b, a])

        assert fake_runner.wraps[0] == fake_runner.wraps[1]

    def test_from_built_variants_requires_input(self, wrapper, fake_runner):
        with pytest.raises(WrapFailure):
            wrapper.from_built_variants([])
        assert fake_runner.calls == []

    def test_from_single_bundle(self, wrapper, fake_runner, layout):
        framework = layout.add_framework()

        wrapper.from_single_bundle(framework)

        assert fake_runner.wraps[0][2:4] == ["-framework", str(framework)]

    def test_from_library_and_headers(self, wrapper, fake_runner, layout):
        library = layout.add_library()
        headers = layout.add_header()

        wrapper.from_library_and_headers(library, headers)

        assert fake_runner.wraps[0][2:6] == ["-library", str(library), "-headers", str(headers)]

    def test_existing_output_is_replaced(self, wrapper, layout):
        layout.output.mkdir(parents=True)
        (layout.output / "stale").write_text("old")

        wrapper.from_single_bundle(layout.add_framework())

        assert not (layout.output / "stale").exists()
        assert (layout.output / "Info.plist").exists()

    def test_failure_removes_partial_output(self, wrapper, fake_runner, layout):
        fake_runner.wrap_returncode = 1
        fake_runner.wrap_leaves_partial = True

        with pytest.raises(WrapFailure) as exc_info:
            wrapper.from_single_bundle(layout.add_framework())

        assert not layout.output.exists()
        assert "multiple platforms" in exc_info.value.output

    def test_missing_output_after_success_is_failure(self, wrapper, fake_runner, layout):
        fake_runner.wrap_writes_nothing = True

        with pytest.raises(WrapFailure, match="produced no bundle"):
            wrapper.from_single_bundle(layout.add_framework())
        assert not layout.output.exists()

    def test_interrupted_merge_leaves_no_bundle(self, wrapper, fake_runner, layout):
        fake_runner.wrap_interrupted = True

        with pytest.raises(KeyboardInterrupt):
            wrapper.from_single_bundle(layout.add_framework())

        assert not layout.output.exists()
        assert not wrapper.staging_dir.exists()

    def test_leftover_staging_directory_is_replaced(self, wrapper, layout):
        leftover = wrapper.staging_dir / "ParsecSDK.xcframework"
        leftover.mkdir(parents=True)
        (leftover / "Info.plist").write_text("half-written")

        wrapper.from_single_bundle(layout.add_framework())

        assert (layout.output / "Info.plist").read_text() == "<plist/>"
        assert not wrapper.staging_dir.exists()
