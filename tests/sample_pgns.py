"""PGN fixtures shared by the test suite."""

SIMPLE_GAME = """[Event "Casual Game"]
[Site "lichess.org"]
[Date "2024.01.01"]
[Round "?"]
[White "Player1"]
[Black "Player2"]
[Result "1-0"]
[WhiteElo "1800"]
[BlackElo "1750"]
[TimeControl "600+5"]

1. e4 e5 2. Nf3 Nc6 3. Bb5 a6 4. Ba4 Nf6 5. O-O Be7 1-0"""

SCHOLARS_MATE = """[Event "Test Game"]
[Site "test"]
[Date "2024.01.01"]
[White "Player1"]
[Black "Player2"]
[Result "1-0"]

1. e4 e5 2. Bc4 Nc6 3. Qh5 Nf6 4. Qxf7# 1-0"""

CHESS_COM_EXPORT = """[Event "Live Chess"]
[Site "Chess.com"]
[Date "2024.11.04"]
[Round "?"]
[White "ChessComPlayer"]
[Black "TestPlayer"]
[Result "1/2-1/2"]
[ECO "B00"]
[WhiteElo "1823"]
[BlackElo "1856"]
[TimeControl "600"]
[EndTime "16:45:32 PST"]
[Termination "Game drawn by agreement"]

1. e4 Nc6 2. Nf3 d6 3. d4 Nf6 4. Nc3 Bg4 5. Be3 e5 6. d5 Ne7 7. Be2 Ng6
8. Nd2 Bxe2 9. Qxe2 Be7 10. O-O-O O-O 11. f3 c6 12. g4 cxd5 13. Nxd5 Nxd5
14. exd5 Bg5 15. f4 exf4 16. Bxf4 Bxf4 17. Kb1 Rc8 18. h4 Qb6 19. h5 Ne5
20. Nc4 Nxc4 21. Qxc4 Qc5 22. Qxc5 Rxc5 23. c3 Rfc8 24. Rd3 Bd2 25. Rc1 Bxc3
26. bxc3 Rxc3 1/2-1/2"""

CLOCK_ANNOTATED = """[Event "Rated Blitz game"]
[White "Alice"]
[Black "Bob"]
[Result "*"]

1. e4 { [%clk 0:02:59] } e5 { [%clk 0:02:58] } 2. Nf3 { [%clk 0:02:55] } *"""

PGN_WITH_COMMENTS = """[Event "Test"]
[White "P1"]
[Black "P2"]
[Result "*"]

1. e4 { Best by test! } e5 2. Nf3 { Developing the knight } Nc6 3. Bb5 { The Ruy Lopez } *"""

PGN_WITH_VARIATIONS = """[Event "Test"]
[White "P1"]
[Black "P2"]
[Result "*"]

1. e4 e5 (1... c5 { Sicilian is also good } 2. Nf3) 2. Nf3 Nc6 *"""

MINIMAL_PGN = "1. e4 e5 2. Nf3"

ILLEGAL_MOVE_PGN = """[Event "Broken"]
[White "P1"]
[Black "P2"]
[Result "*"]

1. e4 e5 2. Ke3 *"""

INVALID_PGN = "This is not a valid PGN format at all!"
