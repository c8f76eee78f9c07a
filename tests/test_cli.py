"""Tests for the idslicer command-line interface."""

from __future__ import annotations

import logging

import pytest
from click.testing import CliRunner

from idslicer.cli.main import cli
from idslicer.cli.policy_cmd import format_range, list_ranges
from idslicer.core.registry import Registry
from idslicer.policy import PolicyReader, PolicyWriter

ONTOLOGY_TTL = """\
@prefix owl: <http://www.w3.org/2002/07/owl#> .
@prefix ex: <https://example.org/ids/> .

ex:EX_0010 a owl:Class .
ex:EX_0012 a owl:Class .
"""


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def policy_file(workdir):
    registry = Registry.for_obo("myont")
    registry.add_allocated("alice", "Alice's range", 1000)
    registry.add_allocated("idslicer", None, 1000)
    path = workdir / "myont-idranges.owl"
    PolicyWriter().write(registry, path)
    return path


def invoke(*args, input=None):
    return CliRunner().invoke(cli, list(args), input=input)


class TestCLIGroup:
    def test_help_lists_commands(self):
        result = invoke("--help")
        assert result.exit_code == 0
        for cmd in ("policy", "tsv"):
            assert cmd in result.output

    def test_tsv_help(self):
        result = invoke("tsv", "--help")
        assert result.exit_code == 0
        for opt in ("--prefix", "--min-id", "--max-id", "--shorten-id", "--random", "--column"):
            assert opt in result.output

    def test_invalid_config(self, workdir):
        (workdir / "idslicer.yaml").write_text("width: wide\n")
        result = invoke("policy", "x-idranges.owl", "-l")
        assert result.exit_code == 1
        assert "Error: Invalid configuration" in result.stderr

    def test_malformed_config(self, workdir):
        (workdir / "idslicer.yaml").write_text("width: [unclosed\n")
        result = invoke("policy", "x-idranges.owl", "-l")
        assert result.exit_code == 1
        assert "Error: Invalid configuration" in result.stderr


class TestPolicyCommand:
    def test_init_creates_policy(self, workdir):
        result = invoke("policy", "myont-idranges.owl", "--init", "myont")
        assert result.exit_code == 0, result.output
        registry = PolicyReader().read(workdir / "myont-idranges.owl")
        assert registry.name == "http://purl.obolibrary.org/obo/myont"
        assert registry.prefix_name == "MYONT"
        assert len(registry) == 0

    def test_init_refuses_existing_file(self, policy_file):
        before = policy_file.read_text()
        result = invoke("policy", str(policy_file), "--init", "myont")
        assert result.exit_code == 1
        assert "Refusing to overwrite" in result.stderr
        assert policy_file.read_text() == before

    def test_list(self, policy_file):
        result = invoke("policy", str(policy_file), "-l")
        assert result.exit_code == 0
        assert result.stdout == "alice: [0..1000)\nidslicer: [1000..2000)\n"

    def test_list_unallocated(self, policy_file):
        result = invoke("policy", str(policy_file), "-l", "--show-unallocated")
        assert result.stdout.splitlines() == [
            "alice: [0..1000)",
            "idslicer: [1000..2000)",
            "Unallocated: [2000..10000000)",
        ]

    def test_list_min_size(self, policy_file):
        result = invoke("policy", str(policy_file), "-l", "--min-size", "1001")
        assert result.exit_code == 0
        assert result.stdout == ""

    def test_add_range(self, policy_file):
        result = invoke("policy", str(policy_file), "--add-range", "bob", "--size", "500", "--comment", "Bob")
        assert result.exit_code == 0, result.output
        assert 'Allocated range [2000..2500) for user "bob"' in result.stderr

        rng = PolicyReader().read(policy_file).get_range("bob")
        assert (rng.range_id, rng.lower, rng.upper, rng.comment) == (3, 2000, 2500, "Bob")

    def test_add_range_default_size_from_config(self, policy_file, workdir):
        (workdir / "idslicer.yaml").write_text("range_size: 250\n")
        result = invoke("policy", str(policy_file), "--add-range", "bob")
        assert result.exit_code == 0, result.output
        assert PolicyReader().read(policy_file).get_range("bob").size == 250

    def test_add_range_too_large(self, policy_file):
        before = policy_file.read_text()
        result = invoke("policy", str(policy_file), "--add-range", "bob", "--size", "99999999")
        assert result.exit_code == 1
        assert "Cannot allocate range: Not enough space for a 99999999-wide range" in result.stderr
        assert policy_file.read_text() == before

    def test_add_range_empty_owner(self, policy_file):
        before = policy_file.read_text()
        result = invoke("policy", str(policy_file), "--add-range", "")
        assert result.exit_code == 1
        assert "Cannot allocate range: Range owner must not be empty" in result.stderr
        assert policy_file.read_text() == before

    def test_output_file(self, policy_file, workdir):
        before = policy_file.read_text()
        result = invoke("policy", str(policy_file), "--add-range", "bob", "-o", "copy-idranges.owl")
        assert result.exit_code == 0, result.output
        assert policy_file.read_text() == before
        assert PolicyReader().read(workdir / "copy-idranges.owl").find_range("bob") is not None

    def test_list_only_does_not_rewrite(self, policy_file):
        policy_file.write_text(policy_file.read_text() + "\n# trailing comment\n")
        before = policy_file.read_text()
        invoke("policy", str(policy_file), "-l")
        assert policy_file.read_text() == before

    def test_missing_file(self, workdir):
        result = invoke("policy", "nope-idranges.owl", "-l")
        assert result.exit_code == 1
        assert "Error: Cannot read policy file" in result.stderr

    def test_invalid_policy(self, workdir):
        path = workdir / "bad-idranges.owl"
        path.write_text("Ontology: <http://example.org/bad-idranges.owl>\n")
        result = invoke("policy", str(path), "-l")
        assert result.exit_code == 1
        assert "Error: Invalid ID range policy: Missing IRI prefix" in result.stderr


    def test_malformed_range_id(self, policy_file):
        policy_file.write_text(policy_file.read_text().replace("idrange:1", "idrange:-1"))
        result = invoke("policy", str(policy_file), "-l")
        assert result.exit_code == 1
        assert "Error: Invalid ID range policy: Invalid range ID" in result.stderr

class TestListRanges:
    def test_list_ranges_sorted_by_lower_bound(self):
        registry = Registry.for_obo("myont", 4)
        registry.add_explicit(1, "b", None, 5000, 6000)
        registry.add_explicit(2, "a", None, 0, 5)
        ranges = list_ranges(registry, show_unallocated=True, min_size=0)
        assert [format_range(r) for r in ranges] == [
            "a: [0..5)",
            "Unallocated: [5..5000)",
            "b: [5000..6000)",
            "Unallocated: [6000..10000)",
        ]
        assert [format_range(r) for r in list_ranges(registry, False, 10)] == ["b: [5000..6000)"]


class TestTSVCommand:
    def test_prefix_and_min_id(self, workdir):
        (workdir / "terms.tsv").write_text("id\tlabel\n\tfoo\n\tbar\n")
        result = invoke("tsv", "terms.tsv", "-p", "EX_", "-w", "4", "-m", "10")
        assert result.exit_code == 0, result.output
        assert result.stdout == "id\tlabel\nEX_0010\tfoo\nEX_0011\tbar\n"

    def test_prefix_requires_min_id(self, workdir):
        (workdir / "terms.tsv").write_text("id\tlabel\n\tfoo\n")
        result = invoke("tsv", "terms.tsv", "-p", "EX_")
        assert result.exit_code == 1
        assert "Missing --min-id" in result.stderr

    @pytest.mark.parametrize("width", ["0", "10", "40"])
    def test_width_out_of_bounds(self, workdir, width):
        (workdir / "terms.tsv").write_text("id\tlabel\n\tfoo\n")
        result = invoke("tsv", "terms.tsv", "-p", "EX_", "-m", "1", "-w", width)
        assert result.exit_code == 1
        assert f"Error: Width value out of bounds: {width}" in result.stderr
        assert result.stdout == ""

    def test_stdin_and_output_separator(self, workdir):
        result = invoke("tsv", "-p", "X", "-m", "1", "--output-sep", "tab", input="id,label\n,a\n")
        assert result.exit_code == 0, result.output
        assert result.stdout == "id\tlabel\nX0000001\ta\n"

    def test_column_by_name_and_output_file(self, workdir):
        (workdir / "terms.csv").write_text("# header comment\nlabel,id\nfoo,\n")
        result = invoke("tsv", "terms.csv", "-p", "EX_", "-w", "3", "-m", "5", "-c", "id", "-o", "out.csv")
        assert result.exit_code == 0, result.output
        assert (workdir / "out.csv").read_text() == "# header comment\nlabel,id\nfoo,EX_005\n"

    def test_invalid_column(self, workdir):
        (workdir / "terms.tsv").write_text("id\tlabel\n\tfoo\n")
        result = invoke("tsv", "terms.tsv", "-p", "EX_", "-m", "1", "-c", "nope")
        assert result.exit_code == 1
        assert "Error: Invalid column name or index: nope" in result.stderr

    def test_no_overwrite(self, workdir):
        (workdir / "terms.tsv").write_text("id\tlabel\nEX_0001\tfoo\n\tbar\n")
        result = invoke("tsv", "terms.tsv", "-p", "EX_", "-w", "4", "-m", "5", "--no-overwrite")
        assert result.stdout == "id\tlabel\nEX_0001\tfoo\nEX_0005\tbar\n"

    def test_exhausted(self, workdir):
        (workdir / "terms.tsv").write_text("id\tlabel\n\ta\n\tb\n")
        result = invoke("tsv", "terms.tsv", "-p", "EX_", "-m", "1", "-M", "2")
        assert result.exit_code == 1
        assert "Cannot generate ID: No available ID in range" in result.stderr

    def test_ontology_ids_are_skipped(self, workdir):
        (workdir / "terms.tsv").write_text("id\tlabel\n\ta\n\tb\n")
        (workdir / "ex.ttl").write_text(ONTOLOGY_TTL)
        result = invoke(
            "tsv", "terms.tsv", "-p", "https://example.org/ids/EX_", "-w", "4", "-m", "10",
            "--ontology", "ex.ttl", "-s",
        )
        assert result.exit_code == 0, result.output
        assert result.stdout == "id\tlabel\nEX:0011\ta\nEX:0013\tb\n"

    def test_policy_range_for_user(self, policy_file, workdir):
        (workdir / "terms.tsv").write_text("id\tlabel\n\ta\n\tb\n")
        result = invoke("tsv", "terms.tsv", "-P", str(policy_file), "-r", "alice", "-s")
        assert result.exit_code == 0, result.output
        assert result.stdout == "id\tlabel\nMYONT:0000000\ta\nMYONT:0000001\tb\n"

    def test_policy_default_range_and_discovery(self, policy_file, workdir):
        (workdir / "terms.tsv").write_text("id\tlabel\n\ta\n")
        result = invoke("tsv", "terms.tsv")
        assert result.exit_code == 0, result.output
        assert result.stdout == "id\tlabel\nhttp://purl.obolibrary.org/obo/MYONT_0001000\ta\n"

    def test_policy_unknown_user(self, policy_file, workdir):
        (workdir / "terms.tsv").write_text("id\tlabel\n\ta\n")
        result = invoke("tsv", "terms.tsv", "-r", "bob")
        assert result.exit_code == 1
        assert "Error: Cannot use ID policy file: No range 'bob' found in ID policy" in result.stderr

    def test_random_ids_in_range(self, policy_file, workdir):
        (workdir / "terms.tsv").write_text("id\tlabel\n\ta\n\tb\n\tc\n")
        result = invoke("tsv", "terms.tsv", "-r", "alice", "--random", "--seed", "4", "-s")
        assert result.exit_code == 0, result.output
        ids = [line.split("\t")[0] for line in result.stdout.splitlines()[1:]]
        assert len(set(ids)) == 3
        for id_ in ids:
            assert id_.startswith("MYONT:")
            assert 0 <= int(id_.split(":")[1]) < 1000
