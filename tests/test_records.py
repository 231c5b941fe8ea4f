# =============================================================================
# test_records.py - Object Program Record Tests
# =============================================================================
# Tests for record rendering and Text record packing.
#
# Test coverage includes:
#   - H / T / M / E record rendering
#   - 30-byte Text record capacity
#   - New Text records at gaps of 0x1000 bytes or more
#   - Splitting object code longer than one record
#   - Emission order and the unnamed Header
# =============================================================================

from sicxe_asm.assembler.records import (
    EndRecord,
    HeaderRecord,
    ModificationRecord,
    RecordAssembler,
    TextRecord,
    render_records,
)


def text_records(records) -> list[TextRecord]:
    return [r for r in records if isinstance(r, TextRecord)]


# =============================================================================
# Rendering
# =============================================================================

class TestRendering:
    """Test fixed-width record rendering."""

    def test_header(self):
        """The name is padded to 6 characters."""
        assert HeaderRecord("COPY", 0x1000, 0x107A).render() == "HCOPY  00100000107A"

    def test_long_name_cut_to_six(self):
        """The Header keeps its fixed width for long program names."""
        rendered = HeaderRecord("LONGNAME", 0, 3).render()
        assert rendered == "HLONGNA000000000003"
        assert len(rendered) == 19

    def test_unnamed_header(self):
        assert HeaderRecord("", 0, 3).render() == "H      000000000003"

    def test_text(self):
        record = TextRecord(0x1036, "B410B400")
        assert record.length == 4
        assert record.end_address == 0x103A
        assert record.render() == "T00103604B410B400"

    def test_modification(self):
        assert ModificationRecord(0x7).render() == "M00000705"

    def test_end(self):
        assert EndRecord(0x1000).render() == "E001000"

    def test_end_without_entry_point(self):
        """A program with no instruction ends with a bare E."""
        assert EndRecord().render() == "E"

    def test_render_records(self):
        """One record per line."""
        text = render_records([HeaderRecord("P", 0, 3), TextRecord(0, "4F0000"), EndRecord(0)])
        assert text == "HP     000000000003\nT000000034F0000\nE000000\n"


# =============================================================================
# Text Record Packing
# =============================================================================

class TestPacking:
    """Test RecordAssembler Text record packing."""

    def test_add_without_open_record(self):
        """add() refuses code when no record is open."""
        records = RecordAssembler()
        assert not records.is_open
        assert records.add("4F0000") is False

    def test_add_rejects_overflow(self):
        """add() returns False and leaves the record unchanged when full."""
        records = RecordAssembler()
        records.open(0)
        assert records.add("00" * 28)
        assert records.add("4F0000") is False
        assert records.next_address == 28
        assert records.add("C4C4")
        assert records.next_address == 30

    def test_contiguous_code_shares_a_record(self):
        records = RecordAssembler()
        records.emit(0, "17202D")
        records.emit(3, "69202D")
        text = text_records(records.finish(0))
        assert text == [TextRecord(0, "17202D69202D")]

    def test_capacity(self):
        """Eleven 3-byte instructions need two records (30 + 3 bytes)."""
        records = RecordAssembler()
        for i in range(11):
            records.emit(i * 3, "4F0000")
        text = text_records(records.finish(0))
        assert [t.length for t in text] == [30, 3]
        assert text[1].start_address == 30

    def test_instruction_not_split_at_capacity(self):
        """An instruction that does not fit starts the next record."""
        records = RecordAssembler()
        records.emit(0, "00" * 28)
        records.emit(28, "4F0000")
        text = text_records(records.finish())
        assert [(t.start_address, t.length) for t in text] == [(0, 28), (28, 3)]

    def test_small_gap_stays_in_record(self):
        """A few reserved bytes between code do not close the record."""
        records = RecordAssembler()
        records.emit(0, "010001")
        records.emit(6, "4F0000")
        text = text_records(records.finish())
        assert text == [TextRecord(0, "0100014F0000")]

    def test_gap_just_below_limit(self):
        """A gap of 0xFFF bytes keeps the record open."""
        records = RecordAssembler()
        records.emit(0, "4F0000")
        records.emit(3 + 0xFFF, "4F0000")
        text = text_records(records.finish())
        assert len(text) == 1

    def test_gap_at_limit(self):
        """A gap of exactly 0x1000 bytes starts a new record."""
        records = RecordAssembler()
        records.emit(0, "4F0000")
        records.emit(3 + 0x1000, "4F0000")
        text = text_records(records.finish())
        assert [t.start_address for t in text] == [0, 0x1003]

    def test_gap_measured_from_last_emitted_code(self):
        """The gap is measured from the last code, not the record start."""
        records = RecordAssembler()
        records.emit(0, "4F0000")
        records.emit(0x0800, "4F0000")
        records.emit(0x1000, "4F0000")
        assert records.next_address == 0x1003
        assert len(text_records(records.finish())) == 1

    def test_large_gap_starts_new_record(self):
        """A jump of 0x1000 or more always starts a new record."""
        records = RecordAssembler()
        records.emit(0x0000, "454F46")
        records.emit(0x1036, "B410")
        text = text_records(records.finish())
        assert [t.start_address for t in text] == [0x0000, 0x1036]

    def test_long_code_is_split(self):
        """Code longer than 30 bytes continues in the next record."""
        records = RecordAssembler()
        records.emit(0x100, "AB" * 45)
        text = text_records(records.finish())
        assert [(t.start_address, t.length) for t in text] == [(0x100, 30), (0x11E, 15)]

    def test_empty_code_ignored(self):
        records = RecordAssembler()
        records.emit(0, "")
        assert text_records(records.finish()) == []

    def test_text_records_never_exceed_capacity(self, copy_object):
        """Every Text record in the COPY program holds at most 30 bytes."""
        for line in copy_object.splitlines():
            if line.startswith("T"):
                assert int(line[7:9], 16) <= 30
                assert len(line) - 9 == 2 * int(line[7:9], 16)


# =============================================================================
# Emission Order
# =============================================================================

class TestEmission:
    """Test finish()."""

    def test_order(self):
        """Header, Text, Modification, End."""
        records = RecordAssembler()
        records.set_header("P", 0, 7)
        records.emit(0, "4B100004")
        records.add_modification(1)
        records.emit(4, "4F0000")
        result = records.finish(0)
        assert result == [
            HeaderRecord("P", 0, 7),
            TextRecord(0, "4B1000044F0000"),
            ModificationRecord(1, 5),
            EndRecord(0),
        ]

    def test_header_without_start(self):
        """Without set_header() an unnamed Header at 0 is emitted."""
        records = RecordAssembler()
        records.emit(0, "4F0000")
        result = records.finish(0)
        assert result[0] == HeaderRecord("", 0, 3)

    def test_empty_program(self):
        """A program with no code still has a Header and an End."""
        result = RecordAssembler().finish()
        assert result == [HeaderRecord("", 0, 0), EndRecord(None)]
