"""Tests for GST state code lookup."""

from gst_invoice.domain.services.gst_state_codes import (
    STATE_CODES,
    get_state_code,
    state_code_from_gstin,
)


class TestGetStateCode:
    def test_known_states(self):
        assert get_state_code("Telangana") == "36"
        assert get_state_code("Andhra Pradesh") == "37"
        assert get_state_code("Maharashtra") == "27"
        assert get_state_code("Delhi") == "07"

    def test_case_and_whitespace(self):
        assert get_state_code("  TAMIL NADU ") == "33"

    def test_unknown(self):
        assert get_state_code("Atlantis") == ""
        assert get_state_code("") == ""
        assert get_state_code(None) == ""

    def test_all_codes_two_digits(self):
        assert len(STATE_CODES) == 36
        assert all(len(code) == 2 and code.isdigit() for code in STATE_CODES.values())


class TestStateCodeFromGstin:
    def test_prefix(self):
        assert state_code_from_gstin("36AAPCM2955G1Z4") == "36"

    def test_empty(self):
        assert state_code_from_gstin("") == ""
        assert state_code_from_gstin(None) == ""
