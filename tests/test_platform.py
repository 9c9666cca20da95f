import pytest

from launcher_store.exceptions import SchemaError
from launcher_store.models.manifests import LibraryInfo
from launcher_store.versions.platform import get_library_path, is_library_allowed


def _library(**data) -> LibraryInfo:
    return LibraryInfo.model_validate({"name": "org.lwjgl:lwjgl:3.2.2", **data})


class TestIsLibraryAllowed:
    def test_no_rules_is_allowed(self):
        assert is_library_allowed(_library(), "linux", "64")

    def test_last_matching_rule_wins(self):
        library = _library(
            rules=[{"action": "allow"}, {"action": "disallow", "os": {"name": "osx"}}]
        )

        assert is_library_allowed(library, "linux", "64")
        assert not is_library_allowed(library, "osx", "64")

    def test_allow_only_for_named_os(self):
        library = _library(rules=[{"action": "allow", "os": {"name": "windows"}}])

        assert is_library_allowed(library, "windows", "64")
        assert not is_library_allowed(library, "linux", "64")

    def test_arch_condition(self):
        library = _library(rules=[{"action": "allow", "os": {"arch": "x86"}}])

        assert is_library_allowed(library, "windows", "32")
        assert not is_library_allowed(library, "windows", "64")

    def test_natives_without_classifier_for_os(self):
        library = _library(natives={"windows": "natives-windows"})

        assert not is_library_allowed(library, "linux", "64")
        assert is_library_allowed(library, "windows", "64")


class TestGetLibraryPath:
    def test_maven_coordinate(self):
        assert (
            get_library_path(_library(), "linux", "64")
            == "org/lwjgl/lwjgl/3.2.2/lwjgl-3.2.2.jar"
        )

    def test_native_classifier_with_arch(self):
        library = _library(natives={"windows": "natives-windows-${arch}"})

        assert (
            get_library_path(library, "windows", "32")
            == "org/lwjgl/lwjgl/3.2.2/lwjgl-3.2.2-natives-windows-32.jar"
        )

    def test_explicit_classifier(self):
        library = LibraryInfo(name="com.mojang:text2speech:1.10.3:natives-linux")

        assert (
            get_library_path(library, "linux", "64")
            == "com/mojang/text2speech/1.10.3/text2speech-1.10.3-natives-linux.jar"
        )

    @pytest.mark.parametrize("name", ["", "org.lwjgl:lwjgl", "org::1.0"])
    def test_invalid_name(self, name):
        with pytest.raises(SchemaError, match="Invalid library name"):
            get_library_path(LibraryInfo(name=name), "linux", "64")
