"""Tests for the slot grid and time-label helpers."""

import pytest

from psipro.scheduling.timegrid import (
    add_minutes,
    format_minutes,
    generate_slots,
    parse_time,
)


class TestGenerateSlots:
    def test_default_agenda_grid(self):
        slots = generate_slots(7, 20, 60)
        assert len(slots) == 13
        assert slots[0] == "07:00"
        assert slots[-1] == "19:00"

    def test_half_hour_slots(self):
        slots = generate_slots(8, 12, 30)
        assert slots == ["08:00", "08:30", "09:00", "09:30", "10:00", "10:30", "11:00", "11:30"]

    @pytest.mark.parametrize(
        "start_hour,end_hour,slot_minutes",
        [(0, 24, 15), (7, 20, 60), (9, 10, 20), (6, 22, 120)],
    )
    def test_exact_multiple_count_and_order(self, start_hour, end_hour, slot_minutes):
        slots = generate_slots(start_hour, end_hour, slot_minutes)
        assert len(slots) == (end_hour - start_hour) * 60 // slot_minutes
        assert slots[0] == f"{start_hour:02d}:00"
        assert all(a < b for a, b in zip(slots, slots[1:]))

    def test_uneven_window_keeps_last_start(self):
        # 09:00-10:00 by 45 min: 09:45 still starts before 10:00 and runs past it
        assert generate_slots(9, 10, 45) == ["09:00", "09:45"]

    def test_full_day_ends_before_midnight(self):
        slots = generate_slots(0, 24, 60)
        assert slots[-1] == "23:00"
        assert "24:00" not in slots

    def test_idempotent(self):
        assert generate_slots(7, 20, 50) == generate_slots(7, 20, 50)

    @pytest.mark.parametrize(
        "start_hour,end_hour,slot_minutes",
        [(10, 10, 30), (12, 8, 30), (-1, 8, 30), (8, 25, 30), (8, 12, 0), (8, 12, -15)],
    )
    def test_rejects_invalid_input(self, start_hour, end_hour, slot_minutes):
        with pytest.raises(ValueError):
            generate_slots(start_hour, end_hour, slot_minutes)


class TestTimeLabels:
    def test_parse_and_format(self):
        assert parse_time("00:00") == 0
        assert parse_time("09:30") == 570
        assert parse_time("24:00") == 1440
        assert format_minutes(570) == "09:30"
        assert format_minutes(65) == "01:05"

    @pytest.mark.parametrize("label", ["9:30", "09:60", "24:30", "25:00", "0930", "", "ab:cd"])
    def test_parse_rejects_malformed(self, label):
        with pytest.raises(ValueError):
            parse_time(label)

    def test_add_minutes(self):
        assert add_minutes("09:00", 50) == "09:50"
        assert add_minutes("23:30", 30) == "24:00"
