import random

from bingo.game.dealer import board_cells, can_deal, deal_cards, distinct_entries, parse_entries
from bingo.game.models import Player, Room, RoomSettings


NINE = "A,B,C,D,E,F,G,H,I"


def _room(entries, grid_size, players=("p1", "p2", "p3")):
    room = Room(code="AB12", host_id=players[0])
    for pid in players:
        room.players[pid] = Player(id=pid, name=pid)
    room.settings = RoomSettings(grid_size=grid_size, entries=entries)
    return room


def test_parse_entries_trims_and_drops_empties():
    assert parse_entries(" a , b,, c ,, ") == ["a", "b", "c"]


def test_parse_entries_keeps_repeats():
    assert parse_entries("a,b,a,c,b") == ["a", "b", "a", "c", "b"]
    assert distinct_entries("a,b,a,c,b") == ["a", "b", "c"]


def test_newlines_do_not_split_entries():
    assert parse_entries("A\nB,C\nD") == ["A\nB", "C\nD"]
    room = _room("A\nB,C\nD,E\nF,G\nH,I", 3)
    assert not can_deal(room)
    assert deal_cards(room) is None


def test_repeated_entries_count_toward_the_grid():
    room = _room("A,A,B,C,D,E,F,G,H", 3)
    assert can_deal(room)
    boards = deal_cards(room, random.Random(3))
    for board in boards.values():
        assert sorted(board) == ["A", "A", "B", "C", "D", "E", "F", "G", "H"]


def test_parse_entries_empty():
    assert parse_entries("") == []
    assert parse_entries(None) == []


def test_deal_three_by_three_gives_everyone_a_permutation():
    room = _room(NINE, 3)
    boards = deal_cards(room, random.Random(1))

    assert set(boards) == {"p1", "p2", "p3"}
    for board in boards.values():
        assert len(board) == 9
        assert sorted(board) == list("ABCDEFGHI")
    assert room.dealt_cards is boards


def test_deal_four_by_four_with_nine_entries_is_a_noop():
    room = _room(NINE, 4)
    assert not can_deal(room)
    assert deal_cards(room) is None
    assert room.dealt_cards == {}


def test_deal_without_settings_is_a_noop():
    room = _room(NINE, 3)
    room.settings = None
    assert deal_cards(room) is None


def test_boards_are_subsets_without_duplicates():
    pool = [f"e{i}" for i in range(40)]
    room = _room(",".join(pool), 5, players=tuple(f"p{i}" for i in range(6)))
    boards = deal_cards(room, random.Random(9))
    for board in boards.values():
        assert len(board) == 25
        assert len(set(board)) == 25
        assert set(board) <= set(pool)
    # independently shuffled
    assert len({tuple(b) for b in boards.values()}) > 1


def test_board_cells_have_stable_ids():
    cells = board_cells(["x", "y"])
    assert cells == [
        {"id": 0, "text": "x", "image": None},
        {"id": 1, "text": "y", "image": None},
    ]
