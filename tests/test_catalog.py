import asyncio
from pathlib import Path

import pytest

from command_catalog import catalog as catalog_module
from command_catalog import scanner
from command_catalog.catalog import CommandCatalog, build_scan_plan, merge_commands
from command_catalog.models import CommandRecord, PluginSource
from command_catalog.security import PathTraversalError
from tests.testtools import StaticSourceStore, command_doc, write_command


def record(name, source="user", description=""):
    return CommandRecord(name=name, description=description, source=source, path=f"/{source}/{name}.md")


class TestBuildScanPlan:
    def test_without_project(self):
        plan = build_scan_plan(Path("/home/me"), [])
        assert [(str(t.root), t.source) for t in plan] == [("/home/me/.claude/commands", "user")]

    def test_full_order(self):
        plan = build_scan_plan(
            Path("/home/me"),
            [PluginSource(path="/plugins/a", priority=1), PluginSource(path="/plugins/b", priority=2)],
            project_path="/work/repo",
        )
        assert [(str(t.root), t.source) for t in plan] == [
            ("/work/repo/.claude/commands", "project"),
            ("/home/me/.claude/commands", "user"),
            ("/plugins/a/commands", "custom"),
            ("/plugins/b/commands", "custom"),
        ]

    def test_empty_project_path_is_ignored(self):
        plan = build_scan_plan(Path("/home/me"), [], project_path="")
        assert [t.source for t in plan] == ["user"]


class TestMergeCommands:
    def test_first_occurrence_wins(self):
        merged = merge_commands([
            [record("fix", "project", "Fix it")],
            [record("fix", "user", "Fix user"), record("deploy:run", "user")],
            [record("deploy:run", "custom"), record("lint", "custom")],
        ])
        assert [(c.name, c.source) for c in merged] == [
            ("fix", "project"),
            ("deploy:run", "user"),
            ("lint", "custom"),
        ]
        assert merged[0].description == "Fix it"

    def test_empty(self):
        assert merge_commands([]) == []
        assert merge_commands([[], []]) == []


class TestListCommands:
    @pytest.mark.asyncio
    async def test_all_roots_absent(self, catalog, tmp_path):
        assert await catalog.list_commands(str(tmp_path / "no-project")) == []

    @pytest.mark.asyncio
    async def test_project_shadows_user(self, catalog, project_dir, project_commands, user_commands):
        write_command(project_commands, "fix.md", command_doc("Fix it"))
        write_command(user_commands, "fix.md", command_doc("Fix user"))
        write_command(user_commands, "deploy/run.md", command_doc("Run deploy"))

        commands = await catalog.list_commands(str(project_dir))

        assert [(c.name, c.source, c.description) for c in commands] == [
            ("fix", "project", "Fix it"),
            ("deploy:run", "user", "Run deploy"),
        ]

    @pytest.mark.asyncio
    async def test_without_project_user_wins(self, catalog, project_commands, user_commands):
        write_command(project_commands, "fix.md", command_doc("Fix it"))
        write_command(user_commands, "fix.md", command_doc("Fix user"))

        commands = await catalog.list_commands()

        assert [(c.name, c.source) for c in commands] == [("fix", "user")]

    @pytest.mark.asyncio
    async def test_plugin_sources(self, home_dir, user_commands, tmp_path):
        first = tmp_path / "plugin-first"
        second = tmp_path / "plugin-second"
        disabled = tmp_path / "plugin-disabled"
        write_command(first / "commands", "shared.md", command_doc("From first"))
        write_command(second / "commands", "shared.md", command_doc("From second"))
        write_command(second / "commands", "review/pr.md", command_doc("Review PR"))
        write_command(disabled / "commands", "hidden.md", command_doc("Hidden"))
        write_command(user_commands, "review/pr.md", command_doc("User review"))

        store = StaticSourceStore([
            PluginSource(path=str(second), priority=20),
            PluginSource(path=str(disabled), priority=0, enabled=False),
            PluginSource(path=str(first), priority=10),
        ])
        catalog = CommandCatalog(home_dir=home_dir, source_store=store)

        commands = {c.name: c for c in await catalog.list_commands()}

        assert set(commands) == {"shared", "review:pr"}
        assert commands["shared"].description == "From first"
        assert commands["shared"].source == "custom"
        assert commands["review:pr"].source == "user"

    @pytest.mark.asyncio
    async def test_names_are_unique(self, catalog, project_dir, project_commands, user_commands):
        for root in (project_commands, user_commands):
            write_command(root, "a.md", command_doc("a"))
            write_command(root, "ns/b.md", command_doc("b"))

        commands = await catalog.list_commands(str(project_dir))

        names = [c.name for c in commands]
        assert len(names) == len(set(names))

    @pytest.mark.asyncio
    async def test_order_ignores_completion_order(self, monkeypatch, catalog, project_dir):
        async def fake_scan(root, source, prefix=""):
            # The highest-precedence root finishes last
            await asyncio.sleep(0.05 if source == "project" else 0)
            return [record("same", source), record(f"only-{source}", source)]

        monkeypatch.setattr(catalog_module, "scan_directory", fake_scan)

        commands = await catalog.list_commands(str(project_dir))

        assert [(c.name, c.source) for c in commands] == [
            ("same", "project"),
            ("only-project", "project"),
            ("only-user", "user"),
        ]

    @pytest.mark.asyncio
    async def test_unparseable_metadata_does_not_break_listing(self, catalog, user_commands):
        write_command(user_commands, "good.md", command_doc("Good"))
        write_command(user_commands, "odd.md", "---\ndescription: Odd\nflag: !!bool maybe\n---\nBody\n")

        commands = {c.name: c for c in await catalog.list_commands()}

        assert set(commands) == {"good", "odd"}
        assert commands["odd"].description == "Odd"

    @pytest.mark.asyncio
    async def test_failing_file_is_dropped_alone(self, monkeypatch, catalog, user_commands):
        real_parse = scanner.parse_document

        def parse(text):
            if "explode" in text:
                raise RecursionError("too deep")
            return real_parse(text)

        write_command(user_commands, "good.md", command_doc("Good"))
        write_command(user_commands, "bad.md", command_doc("explode"))
        monkeypatch.setattr(scanner, "parse_document", parse)

        assert [c.name for c in await catalog.list_commands()] == ["good"]

    @pytest.mark.asyncio
    async def test_broken_source_store(self, home_dir, user_commands):
        class BrokenStore:
            def list_sources(self, source_type):
                raise RuntimeError("database is locked")

        write_command(user_commands, "ok.md", command_doc("Ok"))
        catalog = CommandCatalog(home_dir=home_dir, source_store=BrokenStore())

        assert [c.name for c in await catalog.list_commands()] == ["ok"]

    @pytest.mark.asyncio
    async def test_records_are_fresh_per_call(self, catalog, user_commands):
        path = write_command(user_commands, "fix.md", command_doc("Before"))
        [first] = await catalog.list_commands()
        path.write_text(command_doc("After"), encoding="utf-8")
        [second] = await catalog.list_commands()
        assert (first.description, second.description) == ("Before", "After")


class TestGetCommandContent:
    @pytest.mark.asyncio
    async def test_strips_metadata_and_trims(self, catalog, user_commands):
        path = write_command(user_commands, "fix.md", command_doc("Fix it", body="  Fix $ARGUMENTS now.  \n\n"))
        result = await catalog.get_command_content(str(path))
        assert result.content == "Fix $ARGUMENTS now."

    @pytest.mark.asyncio
    async def test_malformed_metadata(self, catalog, user_commands):
        path = write_command(user_commands, "odd.md", "---\ndescription: a: b\n---\nBody\n")
        assert (await catalog.get_command_content(str(path))).content == "Body"

    @pytest.mark.asyncio
    async def test_no_metadata(self, catalog, user_commands):
        path = write_command(user_commands, "plain.md", "\nPlain body\n")
        assert (await catalog.get_command_content(str(path))).content == "Plain body"

    @pytest.mark.asyncio
    async def test_traversal_is_rejected(self, catalog):
        with pytest.raises(PathTraversalError):
            await catalog.get_command_content("../etc/passwd")

    @pytest.mark.asyncio
    async def test_missing_file_is_empty(self, catalog, tmp_path):
        result = await catalog.get_command_content(str(tmp_path / "missing.md"))
        assert result.content == ""

    @pytest.mark.asyncio
    async def test_directory_is_empty(self, catalog, tmp_path):
        assert (await catalog.get_command_content(str(tmp_path))).content == ""

    @pytest.mark.asyncio
    async def test_unknown_yaml_tag_falls_back(self, catalog, user_commands):
        path = write_command(user_commands, "odd.md", "---\ndescription: ok\nflag: !!bool maybe\n---\nBody\n")
        assert (await catalog.get_command_content(str(path))).content == "Body"

    @pytest.mark.asyncio
    async def test_parse_failure_is_empty(self, monkeypatch, catalog, user_commands):
        def failing_parse(text):
            raise KeyError("maybe")

        path = write_command(user_commands, "fix.md", command_doc("Fix it"))
        monkeypatch.setattr(catalog_module, "parse_document", failing_parse)

        assert (await catalog.get_command_content(str(path))).content == ""
