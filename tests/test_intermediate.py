# =============================================================================
# test_intermediate.py - Intermediate File Tests
# =============================================================================
# Tests for saving pass 1 results and running pass 2 from them.
# =============================================================================

import json

import pytest

from sicxe_asm.assembler import Assembler
from sicxe_asm.assembler.intermediate import (
    FORMAT_NAME,
    FORMAT_VERSION,
    intermediate_from_dict,
    intermediate_to_dict,
    read_intermediate,
    write_intermediate,
)
from sicxe_asm.assembler.parser import parse_source
from sicxe_asm.assembler.pass1 import run_pass1
from sicxe_asm.errors import IntermediateFormatError


class TestRoundTrip:
    """Test writing and reading intermediate files."""

    def test_pass1_result_survives(self, copy_source, tmp_path):
        """Symbols and located statements are preserved."""
        result = run_pass1(parse_source(copy_source, "copy.asm"))
        path = tmp_path / "copy.int"
        write_intermediate(result, path)

        loaded = read_intermediate(path)
        assert loaded.symbols.as_dict() == result.symbols.as_dict()
        assert loaded.statements == result.statements
        assert loaded.start_address == result.start_address
        assert loaded.program_length == result.program_length
        assert loaded.first_executable_address == result.first_executable_address
        assert loaded.program_name == "COPY"
        assert loaded.has_start
        assert loaded.symbols.frozen

    def test_pass2_from_file_matches(self, copy_source, copy_object, tmp_path):
        """Pass 2 from an intermediate file gives the same object program."""
        path = tmp_path / "copy.int"
        asm = Assembler()
        asm.assemble_string(copy_source, "copy.asm")
        asm.write_intermediate(path)

        again = Assembler()
        assert again.assemble_intermediate(path) == copy_object
        assert not again.has_errors()

    def test_document_header(self):
        data = intermediate_to_dict(run_pass1(parse_source("   RSUB\n")))
        assert data["format"] == FORMAT_NAME
        assert data["version"] == FORMAT_VERSION
        assert data["first_executable_address"] == 0
        assert not data["has_start"]


class TestBadFiles:
    """Test files that cannot be decoded."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_intermediate(tmp_path / "missing.int")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.int"
        path.write_text("{not json")
        with pytest.raises(IntermediateFormatError):
            read_intermediate(path)

    def test_wrong_format(self):
        with pytest.raises(IntermediateFormatError):
            intermediate_from_dict({"format": "something-else", "version": 1})

    def test_wrong_version(self):
        with pytest.raises(IntermediateFormatError):
            intermediate_from_dict({"format": FORMAT_NAME, "version": 99})

    def test_missing_field(self):
        data = intermediate_to_dict(run_pass1(parse_source("   RSUB\n")))
        del data["symbols"]
        with pytest.raises(IntermediateFormatError):
            intermediate_from_dict(data)

    def test_unlocated_statement(self):
        data = intermediate_to_dict(run_pass1(parse_source("   RSUB\n")))
        data["statements"][0]["address"] = None
        with pytest.raises(IntermediateFormatError):
            intermediate_from_dict(data)

    def test_duplicate_symbol(self):
        data = intermediate_to_dict(run_pass1(parse_source("A  RSUB\n")))
        data["symbols"].append(dict(data["symbols"][0]))
        with pytest.raises(IntermediateFormatError):
            intermediate_from_dict(data)

    def test_written_file_is_json(self, tmp_path):
        path = tmp_path / "p.int"
        write_intermediate(run_pass1(parse_source("   RSUB\n")), path)
        assert json.loads(path.read_text())["format"] == FORMAT_NAME
