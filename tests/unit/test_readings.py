"""
Unit tests for turning the data row into power readings.
"""
import pytest
from unittest.mock import patch, MagicMock

from src.breaker.readings import (
    SCALED_ENTITIES,
    PowerReading,
    extract_readings,
    friendly_name,
    parse_hex,
    read_entity,
)
from src.common.exceptions import ColumnOutOfRangeError, InvalidHexValueError

ROW = ["202410190930", "1F4", "A", "3E8", "zz", "ff"]


class TestFriendlyName:
    """Test display label derivation"""

    def test_multi_word(self):
        assert friendly_name("kitchen_appliances") == "KitchenAppliances"

    def test_main(self):
        assert friendly_name("main") == "Main"

    def test_single_word(self):
        assert friendly_name("kitchen") == "Kitchen"

    def test_rest_of_word_unchanged(self):
        assert friendly_name("air_conditionerLDK") == "AirConditionerLDK"

    def test_digits_do_not_start_words(self):
        assert friendly_name("floor_2nd") == "Floor2nd"

    def test_repeated_underscores(self):
        assert friendly_name("living__room") == "LivingRoom"


class TestParseHex:
    """Test hexadecimal field decoding"""

    @pytest.mark.parametrize("field,expected", [
        ("0", 0),
        ("1F4", 500),
        ("1f4", 500),
        ("-A", -10),
        ("+ff", 255),
        ("7FFFFFFFFFFFFFFF", 2 ** 63 - 1),
    ])
    def test_valid(self, field, expected):
        assert parse_hex("main", field) == expected

    @pytest.mark.parametrize("field", [
        "", "zz", "0x1F", " 1F", "1F ", "1_F", "1.5", "8000000000000000",
    ])
    def test_invalid(self, field):
        with pytest.raises(InvalidHexValueError) as exc_info:
            parse_hex("main", field)
        assert exc_info.value.entity == "main"


class TestReadEntity:
    """Test single mapping entry extraction"""

    def test_scaled_entities_table(self):
        assert SCALED_ENTITIES == {"main": 10, "ecocute": 10}

    def test_main_scaled_by_ten(self):
        reading = read_entity(ROW, "main", 1)
        assert reading == PowerReading("main", "Main", 5000.0)

    def test_ecocute_scaled_by_ten(self):
        assert read_entity(ROW, "ecocute", 2).watts == 100.0

    def test_other_entities_unscaled(self):
        reading = read_entity(ROW, "kitchen_appliances", 3)
        assert reading.watts == 1000.0
        assert reading.friendly_name == "KitchenAppliances"

    def test_scaling_requires_exact_key(self):
        assert read_entity(ROW, "main_2", 1).watts == 500.0
        assert read_entity(ROW, "Main", 1).watts == 500.0

    def test_value_is_float(self):
        assert isinstance(read_entity(ROW, "light", 5).watts, float)

    def test_out_of_bounds(self):
        with pytest.raises(ColumnOutOfRangeError, match="out of bounds"):
            read_entity(ROW, "garage", len(ROW))

    def test_invalid_hex(self):
        with pytest.raises(InvalidHexValueError, match="garage"):
            read_entity(ROW, "garage", 4)


class TestExtractReadings:
    """Test the per-mapping fold"""

    def test_all_valid(self):
        mappings = {"main": 1, "ecocute": 2, "kitchen_appliances": 3}
        readings = extract_readings(ROW, mappings)

        assert {r.entity: r.watts for r in readings} == {
            "main": 5000.0,
            "ecocute": 100.0,
            "kitchen_appliances": 1000.0,
        }

    def test_repeated_indices(self):
        readings = extract_readings(ROW, {"main": 3, "kitchen": 3})
        assert {r.entity: r.watts for r in readings} == {
            "main": 10000.0,
            "kitchen": 1000.0,
        }

    def test_out_of_bounds_skipped_others_kept(self):
        readings = extract_readings(ROW, {"main": 1, "garage": 42})
        assert [r.entity for r in readings] == ["main"]

    def test_invalid_hex_skipped_others_kept(self):
        readings = extract_readings(ROW, {"garage": 4, "kitchen": 3})
        assert [r.entity for r in readings] == ["kitchen"]

    def test_empty_mappings(self):
        assert extract_readings(ROW, {}) == []

    def test_skip_logs_warning(self):
        with patch("src.breaker.readings.logger") as mock_logger:
            extract_readings(ROW, {"garage": 42})

        mock_logger.warning.assert_called_once()
        assert "garage" in mock_logger.warning.call_args[0][0]

    def test_on_skip_receives_errors(self):
        on_skip = MagicMock()
        extract_readings(ROW, {"garage": 42, "shed": 4, "main": 1}, on_skip=on_skip)

        errors = [c.args[0] for c in on_skip.call_args_list]
        assert len(errors) == 2
        assert isinstance(errors[0], ColumnOutOfRangeError)
        assert isinstance(errors[1], InvalidHexValueError)
