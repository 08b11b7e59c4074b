"""Unit tests for validating and adding moves to an existing History."""

import unittest

from movetree.models.history_model import History
from movetree.services.move_engine_service import InvalidMoveError

from tests.helpers import line, record, sans, structure


class TestValidateMove(unittest.TestCase):
    """Test validation without tree mutation."""

    def test_illegal_move_returns_none(self):
        history = History()
        self.assertIsNone(history.validate_move("e5"))

    def test_legal_move_is_not_added(self):
        history = History(line("e4", "e5"))
        move = history.validate_move("Nf3", history.moves[1])

        self.assertIsNotNone(move)
        self.assertEqual(move.san, "Nf3")
        self.assertEqual(move.ply, 3)
        self.assertIsNone(move.previous)
        self.assertIsNone(history.moves[1].next)
        self.assertEqual(len(history.moves), 2)

    def test_validates_against_setup_position(self):
        fen = "rnbqkbnr/pppp1ppp/8/4p3/4P3/5N2/PPPP1PPP/RNBQKB1R b KQkq - 1 2"
        history = History(setup_fen=fen)
        move = history.validate_move("Nc6")

        self.assertEqual(move.ply, 4)
        self.assertEqual(move.color, "b")
        self.assertIsNone(history.validate_move("e4"))

    def test_lenient_by_default(self):
        history = History()
        self.assertEqual(history.validate_move("Ng1f3").san, "Nf3")
        self.assertIsNone(history.validate_move("Ng1f3", lenient=False))

    def test_accepts_move_mapping(self):
        history = History()
        move = history.validate_move({"from": "e2", "to": "e4"})
        self.assertEqual(move.san, "e4")


class TestAddMove(unittest.TestCase):
    """Test splicing new moves into the tree."""

    def test_first_move_of_empty_history(self):
        history = History()
        move = history.add_move("e4")

        self.assertEqual(history.moves, [move])
        self.assertIs(move.variation, history.moves)
        self.assertIsNone(move.previous)
        self.assertEqual(move.ply, 1)

    def test_extends_line_without_continuation(self):
        history = History()
        e4 = history.add_move("e4")
        e5 = history.add_move("e5", e4)

        self.assertIs(e4.next, e5)
        self.assertIs(e5.previous, e4)
        self.assertIs(e5.variation, history.moves)
        self.assertEqual(sans(history.moves), ["e4", "e5"])
        self.assertEqual(e5.ply, 2)

    def test_existing_continuation_starts_variation(self):
        history = History(line("e4", "e5", "Nf3"))
        e4, e5 = history.moves[0], history.moves[1]

        c5 = history.add_move("c5", e4)

        self.assertIs(e4.next, e5)
        self.assertEqual(e5.variations, [[c5]])
        self.assertIs(c5.variation, e5.variations[0])
        self.assertIs(c5.previous, e4)
        self.assertEqual(c5.ply, 2)
        self.assertEqual(sans(history.moves), ["e4", "e5", "Nf3"])

    def test_each_alternative_gets_its_own_variation(self):
        history = History(line("e4", "e5"))
        e4 = history.moves[0]

        c5 = history.add_move("c5", e4)
        e6 = history.add_move("e6", e4)

        self.assertIs(e4.next, history.moves[1])
        self.assertEqual(history.moves[1].variations, [[c5], [e6]])

    def test_continues_a_variation(self):
        history = History(line("e4", "e5"))
        c5 = history.add_move("c5", history.moves[0])
        nf3 = history.add_move("Nf3", c5)

        self.assertIs(c5.next, nf3)
        self.assertEqual(sans(history.moves[1].variations[0]), ["c5", "Nf3"])
        self.assertEqual(nf3.ply, 3)

    def test_alternative_first_move(self):
        history = History(line("e4", "e5"))
        d4 = history.add_move("d4")

        self.assertEqual(history.moves[0].variations, [[d4]])
        self.assertIsNone(d4.previous)
        self.assertEqual(d4.ply, 1)
        self.assertEqual(structure(history.moves), ["e4", ["d4"], "e5"])

    def test_invalid_move_raises(self):
        history = History(line("e4", "e5"))
        with self.assertRaises(InvalidMoveError):
            history.add_move("Ke3", history.moves[1])
        with self.assertRaises(InvalidMoveError):
            history.add_move("e5")

        self.assertIsNone(history.moves[1].next)
        self.assertEqual(history.moves[0].variations, [])

    def test_adds_move_mapping_with_promotion(self):
        history = History(setup_fen="8/P7/8/8/8/8/8/4k2K w - - 0 1")
        move = history.add_move({"from": "a7", "to": "a8", "promotion": "q"})

        self.assertEqual(move.san, "a8=Q")
        self.assertEqual(move.material_difference, 9)

    def test_emits_move_added(self):
        history = History()
        added = []
        history.move_added.connect(added.append)

        move = history.add_move("e4")
        self.assertEqual(added, [move])

    def test_clear(self):
        history = History(line("e4", "e5"))
        cleared = []
        history.history_cleared.connect(lambda: cleared.append(True))

        history.clear()
        self.assertEqual(history.moves, [])
        self.assertEqual(cleared, [True])

        move = history.add_move("d4")
        self.assertEqual(history.moves, [move])

    def test_history_to_move_inside_variation(self):
        records = [record("e4"), record("e5", line("c5", "Nf3", "d6")), record("Nf3")]
        history = History(records)
        d6 = history.moves[1].variations[0][2]

        self.assertEqual(sans(history.history_to_move(d6)), ["e4", "c5", "Nf3", "d6"])
        self.assertEqual(sans(history.history_to_move(history.moves[0])), ["e4"])

    def test_render_after_edits(self):
        history = History()
        e4 = history.add_move("e4")
        history.add_move("e5", e4)
        history.add_move("c5", e4)

        self.assertEqual(history.render(), "1. e4 e5 (1... c5)")


if __name__ == "__main__":
    unittest.main()
