"""Tests for the block cipher and its parameters."""

import pytest

from blockbreaker.core.exceptions import InvalidProfileError
from blockbreaker.services.cipher.alphabet import AlphabetCodec, CipherProfile
from blockbreaker.services.cipher.block_cipher import BlockCipher
from blockbreaker.services.preprocessing.normalizer import TextNormalizer


class TestBlockCipher:
    """Test suite for the block cipher."""

    @pytest.fixture
    def cipher(self):
        return BlockCipher()

    @pytest.fixture
    def long_plaintext(self):
        return (
            "CRYPTOGRAPHY IS THE STUDY OF SECURE COMMUNICATION IN THE PRESENCE "
            "OF ADVERSARIES. LONG BEFORE COMPUTERS EXISTED PEOPLE INVENTED CIPHERS "
            "TO HIDE MEANING FROM UNAUTHORIZED READERS."
        )

    def test_attack_at_dawn(self, cipher):
        """Known scenario with the default substitution table."""
        result = cipher.encrypt_with_trace("attackatdawn")

        assert result.intermediate == "attackatdawnxyzxyz"
        assert result.text == "atthlvhqwxtkoteote"

    def test_attack_at_dawn_decrypt(self, cipher):
        result = cipher.decrypt_with_trace("atthlvhqwxtkoteote")

        assert result.intermediate == "attackatdawnxyzxyz"
        assert result.text == "attackatdawn"

    def test_caesar_shift_comes_from_substitution_plaintext(self, cipher):
        """The shift of a block is the index of its 4th plaintext letter."""
        result = cipher.encrypt_with_trace("abcdefghi")
        block = result.blocks[0]

        assert block.shift_letter == "d"
        assert block.shift == 3
        assert block.caesar_out == "def"

    def test_roundtrip_multiple_of_nine(self, cipher):
        plaintexts = [
            "abcdefghi",
            "thequickbrownfoxjumpsoverthelazydogs"[:36],
            "zzzzzzzzzaaaaaaaaa",
            "meetmeatthetrainstationatnoontoday"[:27],
        ]
        for plaintext in plaintexts:
            assert len(plaintext) % 9 == 0
            assert cipher.decrypt(cipher.encrypt(plaintext)) == plaintext

    def test_roundtrip_with_custom_profile(self):
        profile = CipherProfile(
            alphabet="zyxwvutsrqponmlkjihgfedcba",
            substitution_table="qwertyuiopasdfghjklzxcvbnm",
        )
        cipher = BlockCipher(profile)
        plaintext = "secretmessagefortheanalyst"[:18]

        assert cipher.decrypt(cipher.encrypt(plaintext)) == plaintext

    def test_roundtrip_long_text(self, cipher, long_plaintext):
        ciphertext = cipher.encrypt(long_plaintext)
        result = cipher.decrypt_with_trace(ciphertext)

        assert len(ciphertext) % 9 == 0
        assert result.intermediate.startswith(TextNormalizer().normalize(long_plaintext))

    def test_encrypt_normalizes_input(self, cipher):
        assert cipher.encrypt("Attack at DAWN!") == cipher.encrypt("attackatdawn")

    def test_padding_cycles(self, cipher):
        assert cipher.pad("a") == "axyzxyzxy"
        assert cipher.pad("abcdefghi") == "abcdefghi"
        assert cipher.pad("") == ""

    def test_strip_padding_is_lossy(self, cipher):
        """Genuine trailing x/y/z letters are stripped with the padding."""
        plaintext = "thesixboxesarelazy"
        assert len(plaintext) == 18

        assert cipher.decrypt(cipher.encrypt(plaintext)) == "thesixboxesarela"

    def test_partial_final_block_passes_through(self, cipher):
        ciphertext = "atthlvhqw" + "abcd"
        result = cipher.decrypt_with_trace(ciphertext)

        assert result.intermediate == "attackatd" + "abcd"
        assert result.blocks[-1].partial is True
        assert result.blocks[-1].shift is None

    def test_decrypt_empty(self, cipher):
        assert cipher.decrypt("") == ""
        assert cipher.decrypt("1234 !!") == ""


class TestCipherProfile:
    """Test suite for cipher parameters."""

    def test_default_profile(self):
        profile = CipherProfile()

        assert profile.forward["a"] == "h"
        assert profile.inverse["h"] == "a"
        assert profile.padding == "xyz"

    def test_rejects_table_that_is_not_a_permutation(self):
        with pytest.raises(InvalidProfileError):
            CipherProfile(substitution_table="a" * 26)

    def test_rejects_short_alphabet(self):
        with pytest.raises(InvalidProfileError):
            CipherProfile(alphabet="abc")

    def test_rejects_padding_outside_alphabet(self):
        with pytest.raises(InvalidProfileError):
            CipherProfile(padding="x1")

    def test_codec_wraps_indices(self):
        codec = AlphabetCodec()

        assert codec.index_of("a") == 0
        assert codec.index_of("z") == 25
        assert codec.letter_at(26) == "a"
        assert codec.letter_at(-1) == "z"
        assert codec.shift("b", -3) == "y"
        assert "A" not in codec


class TestTextNormalizer:
    """Test suite for text normalization."""

    @pytest.fixture
    def normalizer(self):
        return TextNormalizer()

    def test_lowercase_letters_only(self, normalizer):
        assert normalizer.normalize("Hello, World! 123") == "helloworld"

    def test_never_longer_than_input(self, normalizer):
        samples = ["ÄÖÜ straße", "İstanbul", "ﬁne", "A-B_C", "", "  \n\t"]
        for sample in samples:
            result = normalizer.normalize(sample)
            assert len(result) <= len(sample)
            assert all("a" <= c <= "z" for c in result)

    def test_removed_chars_are_counted(self, normalizer):
        result = normalizer.normalize_full("a b, c!")

        assert result.text == "abc"
        assert result.removed_chars == {" ": 2, ",": 1, "!": 1}
        assert result.removed_count == 4
