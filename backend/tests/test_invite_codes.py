"""
Unit tests for invite code generation.
"""
import pytest
from app.modules.workspace.invite_codes import INVITE_CODE_ALPHABET, generate_invite_code


class TestGenerateInviteCode:
    """Test cases for generate_invite_code."""

    def test_default_length(self):
        """Six characters drawn from the alphabet."""
        code = generate_invite_code(6)

        assert len(code) == 6
        assert all(char in INVITE_CODE_ALPHABET for char in code)

    @pytest.mark.parametrize("length", [1, 10, 32])
    def test_custom_length(self, length):
        """Codes honor the requested length."""
        assert len(generate_invite_code(length)) == length

    def test_zero_length(self):
        """A zero length yields an empty code."""
        assert generate_invite_code(0) == ""

    def test_negative_length_rejected(self):
        """Negative lengths are a programming error."""
        with pytest.raises(ValueError):
            generate_invite_code(-1)

    def test_alphabet(self):
        """The alphabet is exactly the 62 ASCII letters and digits."""
        assert len(INVITE_CODE_ALPHABET) == 62
        assert len(set(INVITE_CODE_ALPHABET)) == 62
        assert INVITE_CODE_ALPHABET.isalnum()
        assert INVITE_CODE_ALPHABET.isascii()

    def test_codes_vary(self):
        """Successive codes are independently drawn."""
        codes = {generate_invite_code(6) for _ in range(50)}

        assert len(codes) > 1
