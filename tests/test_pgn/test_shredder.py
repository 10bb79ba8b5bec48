"""Tests for Shredder castling conversion."""

from pgn_mule.pgn.shredder import to_shredder

HEADER = '[Event "Test"]\n[Round "1"]\n\n'


def convert_moves(moves: str, header: str = HEADER) -> str:
    converted = to_shredder(header + moves)
    assert converted.startswith(header)
    return converted[len(header):]


class TestStandardCastling:
    """Tests for games from the standard start position."""

    def test_both_sides_short_castle(self):
        moves = "1. e4 e5 2. Nf3 Nc6 3. Bc4 Bc5 4. O-O Nf6 5. d3 O-O *"

        assert convert_moves(moves) == "1. e4 e5 2. Nf3 Nc6 3. Bc4 Bc5 4. Kh1 Nf6 5. d3 Kh8 *"

    def test_long_castle(self):
        moves = "1. d4 d5 2. Nc3 Nc6 3. Bf4 Bf5 4. Qd2 Qd7 5. O-O-O O-O-O *"

        assert convert_moves(moves) == "1. d4 d5 2. Nc3 Nc6 3. Bf4 Bf5 4. Qd2 Qd7 5. Ka1 Ka8 *"

    def test_zero_notation(self):
        assert convert_moves("1. 0-0 0-0-0 *") == "1. Kh1 Ka8 *"

    def test_suffixes_are_kept(self):
        assert convert_moves("1. O-O+ O-O-O#!? *") == "1. Kh1+ Ka8#!? *"

    def test_black_move_number_marker(self):
        assert convert_moves("12... O-O 13. O-O-O *") == "12... Kh8 13. Ka1 *"

    def test_comments_and_nags_are_untouched(self):
        moves = "1. e4 {O-O was not yet legal} $1 e5 2. O-O ; O-O later\n*"

        assert convert_moves(moves) == "1. e4 {O-O was not yet legal} $1 e5 2. Kh1 ; O-O later\n*"

    def test_variation_tracks_side_to_move(self):
        moves = "1. e4 e5 2. Nf3 Nc6 3. Bc4 Bc5 4. c3 (4. O-O Nf6) 4... Nf6 5. O-O O-O *"

        assert convert_moves(moves) == (
            "1. e4 e5 2. Nf3 Nc6 3. Bc4 Bc5 4. c3 (4. Kh1 Nf6) 4... Nf6 5. Kh1 Kh8 *"
        )

    def test_unnumbered_variation_alternative(self):
        # The variation replaces white's c3, then black castles in the main line
        assert convert_moves("1. c3 (O-O) O-O *") == "1. c3 (Kh1) Kh8 *"

    def test_game_without_castling_is_unchanged(self):
        pgn = HEADER + "1. e4 c5 2. Nf3 d6 1-0"

        assert to_shredder(pgn) == pgn

    def test_headers_are_untouched(self):
        header = '[Event "Test"]\n[Opening "O-O"]\n\n'

        assert convert_moves("1. O-O *", header=header) == "1. Kh1 *"


class TestChess960:
    """Tests for rook files taken from the FEN tag."""

    def test_kqkq_rights_use_outermost_rooks(self):
        header = (
            '[Event "960"]\n'
            '[FEN "nrkbqrbn/pppppppp/8/8/8/8/PPPPPPPP/NRKBQRBN w KQkq - 0 1"]\n\n'
        )

        assert convert_moves("1. O-O O-O-O *", header=header) == "1. Kf1 Kb8 *"

    def test_shredder_letters(self):
        header = (
            '[Event "960"]\n'
            '[FEN "rkr5/8/8/8/8/8/8/RKR5 w CAca - 0 1"]\n\n'
        )

        assert convert_moves("1. O-O O-O-O *", header=header) == "1. Kc1 Ka8 *"

    def test_black_to_move_from_fen(self):
        header = (
            '[Event "Study"]\n'
            '[FEN "r3k2r/8/8/8/8/8/8/R3K2R b KQkq - 0 1"]\n\n'
        )

        assert convert_moves("O-O O-O-O *", header=header) == "Kh8 Ka1 *"


class TestMultipleGames:
    """Tests for text carrying several games."""

    def test_each_game_uses_its_own_fen(self):
        standard = HEADER + "1. O-O *\n\n"
        fischer = (
            '[Event "960"]\n'
            '[FEN "nrkbqrbn/pppppppp/8/8/8/8/PPPPPPPP/NRKBQRBN w KQkq - 0 1"]\n\n'
            "1. O-O *"
        )

        converted = to_shredder(standard + fischer)

        assert "1. Kh1 *" in converted
        assert "1. Kf1 *" in converted

    def test_empty_input(self):
        assert to_shredder("") == ""
