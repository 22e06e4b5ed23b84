"""
Tests for PGN import parsing and header extraction.
"""

import unittest
from datetime import date

from chess_journal.errors import ParseError
from chess_journal.formatting import format_time_control
from chess_journal.pgn_parser import (
    ParsedGame,
    clean_movetext,
    extract_game_metadata,
    get_date_played,
    get_opponent_rating,
    get_player_color,
    get_time_control,
    parse_pgn,
    movetext_tokens,
)
from tests.sample_pgns import (
    CHESS_COM_EXPORT,
    CLOCK_ANNOTATED,
    ILLEGAL_MOVE_PGN,
    INVALID_PGN,
    MINIMAL_PGN,
    PGN_WITH_COMMENTS,
    PGN_WITH_VARIATIONS,
    SCHOLARS_MATE,
    SIMPLE_GAME,
)


class TestParsePGN(unittest.TestCase):

    def test_headers_and_moves(self):
        parsed = parse_pgn(SIMPLE_GAME)
        self.assertEqual(parsed.headers["White"], "Player1")
        self.assertEqual(parsed.headers["Black"], "Player2")
        self.assertEqual(parsed.headers["Event"], "Casual Game")
        self.assertEqual(parsed.headers["WhiteElo"], "1800")
        self.assertEqual(parsed.result, "1-0")
        self.assertEqual(parsed.moves[:3], ["e4", "e5", "Nf3"])
        self.assertEqual(parsed.total_plies, 10)
        self.assertEqual(parsed.moves[8], "O-O")

    def test_checkmate_san(self):
        parsed = parse_pgn(SCHOLARS_MATE)
        self.assertEqual(parsed.total_plies, 7)
        self.assertEqual(parsed.moves[-1], "Qxf7#")

    def test_chess_com_export(self):
        parsed = parse_pgn(CHESS_COM_EXPORT)
        self.assertEqual(parsed.headers["Site"], "Chess.com")
        self.assertEqual(parsed.result, "1/2-1/2")
        self.assertGreater(parsed.total_plies, 20)

    def test_movetext_without_headers(self):
        parsed = parse_pgn(MINIMAL_PGN)
        self.assertEqual(parsed.moves, ["e4", "e5", "Nf3"])
        self.assertEqual(parsed.result, "*")

    def test_comments_are_ignored(self):
        parsed = parse_pgn(PGN_WITH_COMMENTS)
        self.assertEqual(parsed.moves, ["e4", "e5", "Nf3", "Nc6", "Bb5"])

    def test_variations_are_ignored(self):
        parsed = parse_pgn(PGN_WITH_VARIATIONS)
        self.assertEqual(parsed.moves, ["e4", "e5", "Nf3", "Nc6"])

    def test_clock_annotations(self):
        parsed = parse_pgn(CLOCK_ANNOTATED)
        self.assertEqual(parsed.moves, ["e4", "e5", "Nf3"])

    def test_empty_rejected(self):
        for text in ("", "   \n  "):
            with self.assertRaises(ParseError) as ctx:
                parse_pgn(text)
            self.assertIn("empty", str(ctx.exception))

    def test_garbage_rejected(self):
        with self.assertRaises(ParseError):
            parse_pgn(INVALID_PGN)

    def test_illegal_move_rejected(self):
        with self.assertRaises(ParseError):
            parse_pgn(ILLEGAL_MOVE_PGN)

    def test_unrecognised_token_rejected(self):
        with self.assertRaises(ParseError) as ctx:
            parse_pgn("1. e4 e5 2. Nf3 Nc6 3. Bb5 a6 xyz 4. Ba4 *")
        self.assertIn("'xyz'", str(ctx.exception))

    def test_unrecognised_token_after_headers_rejected(self):
        with self.assertRaises(ParseError) as ctx:
            parse_pgn('[Event "x"]\n\n1. e4 zz9 *')
        self.assertIn("zz9", str(ctx.exception))

    def test_two_games_rejected(self):
        with self.assertRaises(ParseError) as ctx:
            parse_pgn("1. e4 e5 *\n\n1. d4 d5 *")
        self.assertIn("more than one game", str(ctx.exception))

    def test_annotated_fixtures_still_parse(self):
        for pgn, plies in (
            (SIMPLE_GAME, 10),
            (SCHOLARS_MATE, 7),
            (CHESS_COM_EXPORT, 52),
            (CLOCK_ANNOTATED, 3),
            (PGN_WITH_COMMENTS, 5),
            (PGN_WITH_VARIATIONS, 4),
            (MINIMAL_PGN, 3),
        ):
            self.assertEqual(parse_pgn(pgn).total_plies, plies)

    def test_move_suffixes_and_nags_accepted(self):
        parsed = parse_pgn("1. e4! $1 e5?! 2. Nf3 $14 Nc6!? *")
        self.assertEqual(parsed.moves, ["e4", "e5", "Nf3", "Nc6"])

    def test_custom_start_position_rejected(self):
        pgn = (
            '[FEN "8/8/8/8/8/8/4K3/4k3 w - - 0 1"]\n'
            '[SetUp "1"]\n\n'
            "1. Kd3 *"
        )
        with self.assertRaises(ParseError):
            parse_pgn(pgn)


class TestMovetextTokens(unittest.TestCase):

    def test_strips_everything_but_mainline_moves(self):
        text = (
            '[Event "Test"]\n[Result "*"]\n\n'
            "1. e4 { open game } e5 (1... c5 (1... e6) 2. Nf3) 2. Nf3 $1 Nc6!? ; aside\n"
            "3... a6 *"
        )
        self.assertEqual(movetext_tokens(text), ["e4", "e5", "Nf3", "Nc6", "a6"])

    def test_keeps_unknown_words(self):
        self.assertEqual(movetext_tokens("1. e4 xyz e5 1-0"), ["e4", "xyz", "e5"])


class TestCleanMovetext(unittest.TestCase):

    def test_strips_clock_and_eval_commands(self):
        text = "1. e4 { [%eval 0.2] [%clk 0:03:00] } e5 {[%clk 0:02:59]} *"
        cleaned = clean_movetext(text)
        self.assertNotIn("%clk", cleaned)
        self.assertNotIn("%eval", cleaned)
        self.assertNotIn("{", cleaned)

    def test_keeps_prose_comments_and_headers(self):
        text = '[White "A"]\n\n1. e4 { [%clk 0:03:00] good move } e5 *'
        cleaned = clean_movetext(text)
        self.assertIn('[White "A"]', cleaned)
        self.assertIn("good move", cleaned)


class TestHeaderExtraction(unittest.TestCase):

    def setUp(self):
        self.parsed = parse_pgn(SIMPLE_GAME)

    def test_player_color_defaults_to_white(self):
        self.assertEqual(get_player_color(self.parsed), "white")
        self.assertEqual(get_player_color(self.parsed, "nobody"), "white")

    def test_player_color_matches_name(self):
        self.assertEqual(get_player_color(self.parsed, "player2"), "black")
        self.assertEqual(get_player_color(self.parsed, "Player1"), "white")

    def test_opponent_rating(self):
        self.assertEqual(get_opponent_rating(self.parsed, "white"), 1750)
        self.assertEqual(get_opponent_rating(self.parsed, "black"), 1800)

    def test_opponent_rating_non_numeric(self):
        parsed = ParsedGame(headers={"BlackElo": "?"}, moves=[])
        self.assertIsNone(get_opponent_rating(parsed, "white"))

    def test_time_control(self):
        self.assertEqual(get_time_control(self.parsed), "600+5")
        self.assertIsNone(get_time_control(ParsedGame(headers={"TimeControl": "-"}, moves=[])))

    def test_date_played(self):
        self.assertEqual(get_date_played(self.parsed), date(2024, 1, 1))

    def test_unknown_or_invalid_dates(self):
        for value in ("????.??.??", "2024.13.01", "2024.02.30", "2024-01-01"):
            parsed = ParsedGame(headers={"Date": value}, moves=[])
            self.assertIsNone(get_date_played(parsed), value)

    def test_utc_date_fallback(self):
        parsed = ParsedGame(headers={"UTCDate": "2023.06.15"}, moves=[])
        self.assertEqual(get_date_played(parsed), date(2023, 6, 15))

    def test_extract_metadata(self):
        meta = extract_game_metadata(self.parsed)
        self.assertEqual(meta.player_color, "white")
        self.assertEqual(meta.opponent_rating, 1750)
        self.assertEqual(meta.time_control, "600+5")
        self.assertEqual(meta.date_played, date(2024, 1, 1))
        self.assertEqual(meta.white_player, "Player1")
        self.assertEqual(meta.total_plies, 10)
        self.assertEqual(meta.result, "1-0")

    def test_explicit_color_wins_over_name(self):
        meta = extract_game_metadata(self.parsed, player_color="black", player_name="Player1")
        self.assertEqual(meta.player_color, "black")
        self.assertEqual(meta.opponent_rating, 1800)

    def test_invalid_explicit_color(self):
        with self.assertRaises(ParseError):
            extract_game_metadata(self.parsed, player_color="green")


class TestFormatTimeControl(unittest.TestCase):

    def test_with_increment(self):
        self.assertEqual(format_time_control("180+2"), "3+2")
        self.assertEqual(format_time_control("600+5"), "10+5")

    def test_without_increment(self):
        self.assertEqual(format_time_control("600"), "10")
        self.assertEqual(format_time_control("180"), "3")

    def test_empty_and_unparseable(self):
        self.assertEqual(format_time_control(None), "")
        self.assertEqual(format_time_control(""), "")
        self.assertEqual(format_time_control("1/259200"), "1/259200")


if __name__ == "__main__":
    unittest.main()
