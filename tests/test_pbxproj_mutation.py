"""Tests for adding and removing files in a parsed manifest."""

import uuid

import pytest

from conftest import (
    APP_DELEGATE_BUILD_FILE,
    APP_DELEGATE_FILE,
    FRAMEWORKS_PHASE,
    HELLO_WORLD_GROUP,
    NATIVE_TARGET,
    RESOURCES_PHASE,
    SOURCES_PHASE,
)
from mcp_rn_upgrader.pbxproj import (
    DuplicateFileError,
    FileKind,
    ProjectGraph,
    UnsupportedOperationError,
    add,
    apply_operation,
    parse,
    remove,
    serialize,
)
from mcp_rn_upgrader.pbxproj import model
from mcp_rn_upgrader.pbxproj.model import BuildMembership, BuildPhase


def _referencing(graph: ProjectGraph, record_id: str) -> list[str]:
    """Ids of records whose attributes mention record_id."""
    found = []
    for record in graph.objects.values():
        ids: set[str] = set()
        model._collect_ids(record.to_attributes(), ids)
        if record_id in ids:
            found.append(record.id)
    return found


class TestAdd:
    def test_add_source_file(self, hello_world: ProjectGraph) -> None:
        """Test that a Swift file gets a record, a build file and a group entry."""
        result = add(hello_world, "HelloWorld/NewModule.swift")

        record = hello_world.get(result.file_id)
        assert record.isa == "PBXFileReference"
        assert record.path == "HelloWorld/NewModule.swift"
        assert record.attributes["name"] == "NewModule.swift"
        assert record.attributes["lastKnownFileType"] == "sourcecode.swift"
        assert record.attributes["sourceTree"] == "<group>"

        assert result.kind is FileKind.SOURCE
        assert result.group_id == HELLO_WORLD_GROUP
        assert result.phase_id == SOURCES_PHASE
        assert not result.created_group
        assert not result.created_phase

        membership = hello_world.get(result.membership_id)
        assert isinstance(membership, BuildMembership)
        assert membership.file_record_id == result.file_id
        assert hello_world.get(SOURCES_PHASE).members[-1] == result.membership_id
        assert hello_world.get(HELLO_WORLD_GROUP).child_ids()[-1] == result.file_id
        assert hello_world.check_invariants() == []

    def test_add_header_has_no_build_file(self, hello_world: ProjectGraph) -> None:
        result = add(hello_world, "HelloWorld/Bridge.h")

        assert result.kind is FileKind.HEADER
        assert result.membership_id is None
        assert result.phase_id is None
        assert result.file_id in hello_world.get(HELLO_WORLD_GROUP).child_ids()
        assert not any(
            m.file_record_id == result.file_id for m in hello_world.memberships()
        )

    @pytest.mark.parametrize(
        ("path", "phase_id"),
        [
            ("HelloWorld/Inter.ttf", RESOURCES_PHASE),
            ("HelloWorld/PrivacyInfo.xcprivacy", RESOURCES_PHASE),
            ("HelloWorld/Vendor.framework", FRAMEWORKS_PHASE),
            ("HelloWorld/libThing.a", FRAMEWORKS_PHASE),
            ("HelloWorld/Native.mm", SOURCES_PHASE),
        ],
    )
    def test_add_goes_to_phase_for_kind(
        self, hello_world: ProjectGraph, path: str, phase_id: str
    ) -> None:
        result = add(hello_world, path)

        assert result.phase_id == phase_id
        assert result.membership_id in hello_world.get(phase_id).members

    def test_new_records_annotated(self, hello_world: ProjectGraph) -> None:
        result = add(hello_world, "HelloWorld/NewModule.swift")
        text = serialize(hello_world)

        assert f"{result.file_id} /* NewModule.swift */ = {{isa = PBXFileReference;" in text
        assert f"{result.membership_id} /* NewModule.swift in Sources */," in text

    def test_explicit_category_overrides_extension(self, hello_world: ProjectGraph) -> None:
        result = add(hello_world, "HelloWorld/Generated.inc", category="source")

        assert result.kind is FileKind.SOURCE
        assert result.phase_id == SOURCES_PHASE
        assert parse(serialize(hello_world)) == hello_world

    def test_library_category_alias(self, hello_world: ProjectGraph) -> None:
        result = add(hello_world, "HelloWorld/Thing.xcframework", category="library")

        assert result.kind is FileKind.FRAMEWORK
        assert result.phase_id == FRAMEWORKS_PHASE
        assert parse(serialize(hello_world)) == hello_world

    @pytest.mark.parametrize(
        ("path", "category", "kind", "file_type"),
        [
            ("HelloWorld/Generated.inc", "source", FileKind.SOURCE, "sourcecode.c.c"),
            ("HelloWorld/Prefix.pch", "header", FileKind.HEADER, "sourcecode.c.h"),
            ("HelloWorld/Thing.xcframework", "library", FileKind.FRAMEWORK, "wrapper.framework"),
            ("HelloWorld/Legacy.swift", "resource", FileKind.RESOURCE, "file"),
            ("HelloWorld/Native.mm", "source", FileKind.SOURCE, "sourcecode.cpp.objcpp"),
        ],
    )
    def test_category_survives_reload(
        self, hello_world: ProjectGraph, path: str, category: str, kind: FileKind, file_type: str
    ) -> None:
        """Test that the chosen kind is written as the record's file type."""
        result = add(hello_world, path, category=category)

        assert hello_world.get(result.file_id).attributes["lastKnownFileType"] == file_type
        reloaded = parse(serialize(hello_world))
        assert reloaded.get(result.file_id).kind is kind
        assert reloaded == hello_world

    def test_category_source_group_found_after_reload(self, no_sources: ProjectGraph) -> None:
        created = add(no_sources, "Demo/Generated.inc", category="source")
        reloaded = parse(serialize(no_sources))

        result = add(reloaded, "Demo/Icon.png")

        assert created.created_group
        assert result.group_id == created.group_id
        assert not result.created_group

    def test_unknown_category_leaves_graph_untouched(
        self, hello_world: ProjectGraph, hello_world_text: str
    ) -> None:
        with pytest.raises(ValueError, match="Unknown file category"):
            add(hello_world, "HelloWorld/Thing.swift", category="plugin")

        assert serialize(hello_world) == hello_world_text

    def test_empty_path_rejected(self, hello_world: ProjectGraph) -> None:
        with pytest.raises(ValueError, match="empty"):
            add(hello_world, "   ")

    def test_duplicate_path_rejected(
        self, hello_world: ProjectGraph, hello_world_text: str
    ) -> None:
        with pytest.raises(DuplicateFileError) as exc_info:
            add(hello_world, "HelloWorld/AppDelegate.swift")

        assert exc_info.value.file_id == APP_DELEGATE_FILE
        assert serialize(hello_world) == hello_world_text

    def test_path_with_spaces_is_quoted(self, hello_world: ProjectGraph) -> None:
        add(hello_world, "HelloWorld/My Module.swift")
        text = serialize(hello_world)

        assert 'name = "My Module.swift"; path = "HelloWorld/My Module.swift";' in text
        assert parse(text) == hello_world

    def test_result_survives_reparse(self, hello_world: ProjectGraph) -> None:
        """Test that the written manifest parses back to the same graph."""
        add(hello_world, "HelloWorld/NewModule.swift")
        add(hello_world, "HelloWorld/Bridge.h")
        add(hello_world, "HelloWorld/Inter.ttf")

        assert parse(serialize(hello_world)) == hello_world

    def test_untouched_records_keep_their_text(
        self, hello_world: ProjectGraph, hello_world_text: str
    ) -> None:
        add(hello_world, "HelloWorld/NewModule.swift")
        text = serialize(hello_world)

        shell_script = hello_world.get("C38B50BA6285516D6DCD4F65").source_text
        assert shell_script in text
        assert hello_world.get(NATIVE_TARGET).source_text is not None


class TestFreshIds:
    def test_new_ids_are_unique(self, hello_world: ProjectGraph) -> None:
        before = hello_world.used_ids()
        new_ids = []
        for i in range(20):
            result = add(hello_world, f"HelloWorld/File{i}.swift")
            new_ids.extend([result.file_id, result.membership_id])

        assert len(set(new_ids)) == len(new_ids)
        assert not before & set(new_ids)
        assert all(model.is_object_id(i) for i in new_ids)

    def test_colliding_candidate_is_skipped(
        self, hello_world: ProjectGraph, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that a generated id already present in the graph is never reused."""
        taken = uuid.UUID(hex=APP_DELEGATE_FILE + "00000000")
        first = uuid.UUID(hex="ABCDEF0123456789ABCDEF01" + "00000000")
        second = uuid.UUID(hex="ABCDEF0123456789ABCDEF02" + "00000000")
        sequence = iter([taken, first, taken, second])
        monkeypatch.setattr(model.uuid, "uuid4", lambda: next(sequence))

        result = add(hello_world, "HelloWorld/NewModule.swift")

        assert result.file_id == "ABCDEF0123456789ABCDEF01"
        assert result.membership_id == "ABCDEF0123456789ABCDEF02"
        assert hello_world.get(APP_DELEGATE_FILE).path == "HelloWorld/AppDelegate.swift"


class TestGroupSelection:
    def test_creates_group_when_no_code_group(self, no_sources: ProjectGraph) -> None:
        result = add(no_sources, "Demo/Main.swift")

        assert result.created_group
        group = no_sources.get(result.group_id)
        assert group.display_name == "Sources"
        assert group.attributes["sourceTree"] == "<group>"
        assert result.group_id in no_sources.get("A20000000000000000000001").child_ids()

    @pytest.mark.parametrize(
        ("path", "name"),
        [
            ("Demo/Bridge.h", "Headers"),
            ("Demo/Config.json", "Resources"),
            ("Demo/Vendor.framework", "Frameworks"),
        ],
    )
    def test_created_group_named_after_kind(
        self, no_sources: ProjectGraph, path: str, name: str
    ) -> None:
        result = add(no_sources, path)

        assert no_sources.get(result.group_id).display_name == name

    def test_first_code_group_wins(self, no_sources_text: str) -> None:
        """Test that a resources-only group listed first is passed over.

        After adding Main.swift the main group (resources only) precedes the
        new Sources group (one source file) in table order.
        """
        for _ in range(3):
            graph = parse(no_sources_text)
            sources_group = add(graph, "Demo/Main.swift").group_id

            result = add(graph, "Demo/Icon.png")

            assert result.group_id == sources_group
            assert not result.created_group

    def test_created_group_survives_reparse(self, no_sources: ProjectGraph) -> None:
        add(no_sources, "Demo/Main.swift")

        assert parse(serialize(no_sources)) == no_sources


class TestPhaseCreation:
    def test_missing_phase_is_created_and_attached(self, no_sources: ProjectGraph) -> None:
        result = add(no_sources, "Demo/Config.json")

        assert result.created_phase
        phase = no_sources.get(result.phase_id)
        assert isinstance(phase, BuildPhase)
        assert phase.isa == "PBXResourcesBuildPhase"
        assert phase.members == [result.membership_id]
        target = no_sources.get("A30000000000000000000001")
        assert target.attributes["buildPhases"][-1] == result.phase_id

    def test_new_sections_inserted_in_order(self, no_sources: ProjectGraph) -> None:
        add(no_sources, "Demo/Config.json")
        text = serialize(no_sources)

        order = [
            "/* Begin PBXBuildFile section */",
            "/* Begin PBXFileReference section */",
            "/* Begin PBXProject section */",
            "/* Begin PBXResourcesBuildPhase section */",
            "/* Begin PBXSourcesBuildPhase section */",
        ]
        positions = [text.index(marker) for marker in order]
        assert positions == sorted(positions)
        assert parse(text) == no_sources


class TestRemove:
    def test_remove_by_project_path(self, hello_world: ProjectGraph) -> None:
        outcome = remove(hello_world, "ios/HelloWorld/AppDelegate.swift")

        assert outcome.removed
        assert outcome.file_id == APP_DELEGATE_FILE
        assert outcome.membership_ids == (APP_DELEGATE_BUILD_FILE,)
        assert hello_world.get(APP_DELEGATE_FILE) is None
        assert hello_world.get(APP_DELEGATE_BUILD_FILE) is None
        assert hello_world.get(SOURCES_PHASE).members == []
        assert APP_DELEGATE_FILE not in hello_world.get(HELLO_WORLD_GROUP).child_ids()

    def test_remove_leaves_no_dangling_references(self, hello_world: ProjectGraph) -> None:
        remove(hello_world, "AppDelegate.swift")

        assert hello_world.check_invariants() == []
        assert _referencing(hello_world, APP_DELEGATE_FILE) == []
        assert _referencing(hello_world, APP_DELEGATE_BUILD_FILE) == []
        assert APP_DELEGATE_FILE not in serialize(hello_world)

    def test_remove_clears_every_build_file(self, hello_world: ProjectGraph) -> None:
        """Test that a file built in two phases loses both build files."""
        extra = BuildMembership(
            id="FEEDFACE0000000000000001", isa="PBXBuildFile", file_record_id=APP_DELEGATE_FILE
        )
        hello_world.insert(extra, "AppDelegate.swift in Resources")
        hello_world.get(RESOURCES_PHASE).members.append(extra.id)

        outcome = remove(hello_world, "HelloWorld/AppDelegate.swift")

        assert set(outcome.membership_ids) == {APP_DELEGATE_BUILD_FILE, extra.id}
        assert extra.id not in hello_world.get(RESOURCES_PHASE).members
        assert hello_world.check_invariants() == []

    def test_remove_clears_stray_references(self, hello_world: ProjectGraph) -> None:
        hello_world.get(FRAMEWORKS_PHASE).members.append(APP_DELEGATE_BUILD_FILE)

        outcome = remove(hello_world, "HelloWorld/AppDelegate.swift")

        assert APP_DELEGATE_BUILD_FILE not in hello_world.get(FRAMEWORKS_PHASE).members
        assert FRAMEWORKS_PHASE in outcome.touched

    def test_not_found_changes_nothing(
        self, hello_world: ProjectGraph, hello_world_text: str
    ) -> None:
        outcome = remove(hello_world, "ios/HelloWorld/Missing.swift")

        assert not outcome.removed
        assert outcome.status == "not_found"
        assert outcome.path == "HelloWorld/Missing.swift"
        assert outcome.total_files == 8
        assert "HelloWorld/AppDelegate.swift" in outcome.candidates
        assert serialize(hello_world) == hello_world_text

    def test_removing_every_file_keeps_manifest_loadable(self, no_sources: ProjectGraph) -> None:
        """Test that an emptied file reference table still parses."""
        for path in ("Info.plist", "Demo.app"):
            assert remove(no_sources, path).removed
        text = serialize(no_sources)

        assert no_sources.file_records() == []
        assert "/* Begin PBXFileReference section */\n/* End PBXFileReference section */" in text
        reloaded = parse(text)
        assert reloaded == no_sources
        assert serialize(reloaded) == text

    def test_remove_result_survives_reparse(self, hello_world: ProjectGraph) -> None:
        remove(hello_world, "HelloWorld/LaunchScreen.storyboard")

        assert parse(serialize(hello_world)) == hello_world


class TestAddRemoveInverse:
    @pytest.mark.parametrize(
        "path",
        [
            "HelloWorld/NewModule.swift",
            "HelloWorld/Bridge.h",
            "HelloWorld/Inter.ttf",
            "HelloWorld/Vendor.framework",
        ],
    )
    def test_remove_undoes_add(self, hello_world_text: str, path: str) -> None:
        original = parse(hello_world_text)
        graph = parse(hello_world_text)

        add(graph, path)
        remove(graph, path)

        assert graph == original
        assert serialize(graph) == hello_world_text


class TestApplyOperation:
    def test_dispatches_add(self, hello_world: ProjectGraph) -> None:
        result = apply_operation(hello_world, "add", "HelloWorld/NewModule.swift")

        assert result.file_id in hello_world.objects

    def test_dispatches_remove_with_prefix(self, hello_world: ProjectGraph) -> None:
        outcome = apply_operation(
            hello_world, "remove", "app/HelloWorld/AppDelegate.swift", strip_prefix="app/"
        )

        assert outcome.file_id == APP_DELEGATE_FILE

    def test_unsupported_operation(
        self, hello_world: ProjectGraph, hello_world_text: str
    ) -> None:
        with pytest.raises(UnsupportedOperationError, match="Use 'add' or 'remove'"):
            apply_operation(hello_world, "rename", "HelloWorld/AppDelegate.swift")

        assert serialize(hello_world) == hello_world_text
