"""
游戏引擎测试
Game Engine Tests
"""
import pytest

from conftest import StubRng
from rps_duel.game import (
    GameEngine, ComputerDecisionEngine, GameMode, Gesture, Side, RoundPhase,
    MatchInitialized, RoundStarted, GestureSubmitted, RoundResolved, MatchEnded
)

R, P, S = Gesture.ROCK, Gesture.PAPER, Gesture.SCISSORS


def kinds(events):
    return [type(event).__name__ for event in events]


@pytest.fixture
def pvp(make_engine):
    engine = make_engine()
    engine.initialize(GameMode.PLAYER_VS_PLAYER, 5, "Alice", "Bob")
    return engine


def play_pvp_round(engine, key_a, key_b):
    assert engine.start_round()
    if key_a:
        assert engine.submit_input(Side.A, key_a)
    if key_b:
        assert engine.submit_input(Side.B, key_b)


# ----------------------------------------------------------------------
# 初始化与回合开始
# ----------------------------------------------------------------------

def test_initialize_emits_match_initialized(make_engine, events):
    engine = make_engine()
    assert engine.initialize("pvc", 5, "Alice", "CPU", 1)
    assert events == [MatchInitialized(GameMode.PLAYER_VS_COMPUTER, 5)]
    assert engine.state.phase is RoundPhase.IDLE
    assert engine.player(Side.A).description == "Alice: R=Rock, P=Paper, S=Scissors"
    assert engine.player(Side.B).description == "CPU: Medium (Basic Pattern)"


def test_initialize_pvp_uses_distinct_bindings(pvp):
    assert pvp.player(Side.A).description == "Alice: A=Rock, S=Paper, D=Scissors"
    assert pvp.player(Side.B).description == "Bob: J=Rock, K=Paper, L=Scissors"


def test_initialize_rejects_unknown_mode(make_engine, events):
    engine = make_engine()
    assert not engine.initialize("online", 5, "Alice", "Bob")
    assert not engine.is_initialized
    assert events == []


def test_out_of_range_difficulty_is_clamped(make_engine):
    engine = make_engine()
    engine.initialize(GameMode.PLAYER_VS_COMPUTER, 3, "Alice", "CPU", 7)
    assert engine.player(Side.B).description == "CPU: Hard (Advanced Pattern)"


def test_operations_before_initialize_are_noops(make_engine, events):
    engine = make_engine()
    assert not engine.start_round()
    assert not engine.submit_input(Side.A, "r")
    assert not engine.process_key("r")
    assert not engine.check_round_completion()
    assert not engine.force_end_round()
    assert not engine.reset_match()
    assert engine.state is None
    assert engine.player(Side.A) is None
    assert engine.time_remaining() == 0.0
    assert events == []


def test_start_round_hides_computer_choice(make_engine, events):
    engine = make_engine(StubRng(ints=[2]))
    engine.initialize(GameMode.PLAYER_VS_COMPUTER, 5, "Alice", "CPU", 0)
    assert engine.start_round()
    
    assert events[-1] == RoundStarted(1)
    computer = engine.player(Side.B)
    assert computer.has_submitted
    assert computer.gesture is None
    assert not any(isinstance(event, GestureSubmitted) for event in events)


def test_start_round_while_active_is_noop(pvp, events):
    pvp.start_round()
    pvp.submit_input(Side.A, "a")
    assert not pvp.start_round()
    assert pvp.state.current_round == 1
    assert pvp.player(Side.A).has_submitted


def test_time_remaining_uses_injected_clock(pvp, clock):
    pvp.start_round()
    assert pvp.time_remaining() == 3.0
    clock.advance(1.0)
    assert pvp.time_remaining() == pytest.approx(2.0)


# ----------------------------------------------------------------------
# 出手仲裁
# ----------------------------------------------------------------------

def test_pvc_round_full_event_sequence(make_engine, events):
    engine = make_engine(StubRng(ints=[2]))
    engine.initialize(GameMode.PLAYER_VS_COMPUTER, 5, "Alice", "CPU", 0)
    engine.start_round()
    assert engine.submit_input(Side.A, "R")
    
    assert kinds(events) == ["MatchInitialized", "RoundStarted", "GestureSubmitted", "RoundResolved"]
    assert events[2] == GestureSubmitted(Side.A, R)
    assert events[3] == RoundResolved(R, S, Side.A, "Rock beats Scissors")
    assert engine.state.wins_a == 1
    assert engine.state.phase is RoundPhase.RESOLVED
    assert engine.player(Side.B).gesture is S


def test_unmapped_input_is_rejected(pvp, events):
    pvp.start_round()
    before = len(events)
    assert not pvp.submit_input(Side.A, "j")
    assert not pvp.submit_input(Side.A, "x")
    assert not pvp.submit_input("c", "a")
    assert len(events) == before
    assert not pvp.player(Side.A).has_submitted


def test_duplicate_submission_is_rejected(pvp, events):
    pvp.start_round()
    assert pvp.submit_input(Side.A, "a")
    assert not pvp.submit_input(Side.A, "d")
    assert pvp.submit_input(Side.B, "l")
    
    result = events[-1]
    assert isinstance(result, RoundResolved)
    assert result.gesture_a is R
    assert sum(isinstance(event, GestureSubmitted) for event in events) == 2


def test_computer_side_does_not_accept_input(make_engine):
    engine = make_engine()
    engine.initialize(GameMode.PLAYER_VS_COMPUTER, 5, "Alice", "CPU", 0)
    engine.start_round()
    assert not engine.submit_input(Side.B, "r")


def test_input_without_active_round_is_rejected(pvp, events):
    assert not pvp.submit_input(Side.A, "a")
    play_pvp_round(pvp, "a", "j")
    before = len(events)
    assert not pvp.submit_input(Side.A, "a")
    assert len(events) == before


def test_process_key_routes_to_mapped_side(pvp, events):
    pvp.start_round()
    assert pvp.process_key("a")
    assert not pvp.process_key("q")
    assert pvp.process_key("L")
    
    assert events[-1] == RoundResolved(R, S, Side.A, "Rock beats Scissors")


def test_gestures_hidden_until_resolution(pvp):
    pvp.start_round()
    pvp.submit_input(Side.A, "s")
    assert pvp.player(Side.A).gesture is None
    pvp.submit_input(Side.B, "j")
    assert pvp.player(Side.A).gesture is P
    assert pvp.player(Side.B).gesture is R


# ----------------------------------------------------------------------
# 回合结算
# ----------------------------------------------------------------------

def test_draw_round(pvp, events):
    play_pvp_round(pvp, "a", "j")
    state = pvp.state
    assert (state.wins_a, state.wins_b, state.draws) == (0, 0, 1)
    assert events[-1] == RoundResolved(R, R, None, "It's a tie!")


def test_side_b_win_reason(pvp, events):
    play_pvp_round(pvp, "d", "j")
    assert events[-1] == RoundResolved(S, R, Side.B, "Rock beats Scissors")
    assert pvp.state.wins_b == 1


def test_deadline_forfeit(pvp, events, clock):
    pvp.start_round()
    pvp.submit_input(Side.A, "s")
    assert not pvp.check_round_completion()
    
    clock.advance(3.0)
    assert pvp.check_round_completion()
    assert events[-1] == RoundResolved(P, None, Side.A, "Bob forfeited!")
    assert pvp.state.wins_a == 1


def test_input_after_deadline_is_rejected_and_resolves_round(pvp, events, clock):
    pvp.start_round()
    pvp.submit_input(Side.A, "a")
    clock.advance(5.0)
    
    assert not pvp.submit_input(Side.B, "k")
    assert events[-1] == RoundResolved(R, None, Side.A, "Bob forfeited!")
    assert not pvp.is_round_active


def test_double_forfeit_is_draw(pvp, events):
    pvp.start_round()
    assert pvp.force_end_round()
    assert events[-1] == RoundResolved(None, None, None, "Both players forfeited!")
    assert pvp.state.draws == 1


def test_force_end_round_without_active_round(pvp, events):
    assert not pvp.force_end_round()
    play_pvp_round(pvp, "a", "j")
    before = len(events)
    assert not pvp.force_end_round()
    assert len(events) == before


def test_completion_check_is_idempotent(pvp, events, clock):
    play_pvp_round(pvp, "a", "k")
    before = len(events)
    clock.advance(10.0)
    assert not pvp.check_round_completion()
    assert not pvp.check_round_completion()
    assert len(events) == before
    assert pvp.state.wins_b == 1


def test_computer_learns_only_from_real_gestures(make_engine, clock):
    engine = make_engine(StubRng(ints=[0, 0]))
    engine.initialize(GameMode.PLAYER_VS_COMPUTER, 5, "Alice", "CPU", 0)
    
    engine.start_round()
    engine.submit_input(Side.A, "p")
    assert engine.player(Side.B).opponent_history == (P,)
    
    engine.start_round()
    clock.advance(3.0)
    engine.check_round_completion()
    state = engine.state
    assert state.wins_b == 1
    assert engine.player(Side.B).opponent_history == (P,)


def test_round_history_records(pvp):
    play_pvp_round(pvp, "a", "l")
    play_pvp_round(pvp, "a", "j")
    records = pvp.round_history
    assert [record.round_number for record in records] == [1, 2]
    assert records[0].winner is Side.A
    assert records[1].to_dict()['winner'] is None
    assert records[1].to_dict()['gesture_b'] == "rock"


# ----------------------------------------------------------------------
# 对局结束
# ----------------------------------------------------------------------

def test_majority_ends_match_early(pvp, events):
    for _ in range(3):
        play_pvp_round(pvp, "a", "l")
    
    assert isinstance(events[-1], MatchEnded)
    assert events[-1].winner is Side.A
    assert events[-1].counters.wins_a == 3
    assert events[-1].counters.phase is RoundPhase.MATCH_FINISHED
    assert pvp.state.current_round == 3
    assert pvp.is_match_finished
    assert not pvp.start_round()


def test_best_of_three_ends_after_two_wins(make_engine, events):
    engine = make_engine()
    engine.initialize(GameMode.PLAYER_VS_PLAYER, 3, "Alice", "Bob")
    play_pvp_round(engine, "a", "l")
    play_pvp_round(engine, "s", "j")
    
    assert events[-1] == MatchEnded(Side.A, engine.state)
    assert not engine.start_round()
    assert RoundStarted(3) not in events


def test_round_cap_with_level_score_is_draw(make_engine, events):
    engine = make_engine()
    engine.initialize(GameMode.PLAYER_VS_PLAYER, 2, "Alice", "Bob")
    play_pvp_round(engine, "a", "l")
    play_pvp_round(engine, "a", "k")
    
    assert isinstance(events[-1], MatchEnded)
    assert events[-1].winner is None
    assert engine.winner() is None


def test_listener_may_start_next_round_during_result(make_engine, events):
    engine = make_engine()
    engine.initialize(GameMode.PLAYER_VS_PLAYER, 3, "Alice", "Bob")
    
    def auto_advance(event):
        if isinstance(event, RoundResolved):
            engine.start_round()
    
    engine.add_listener(auto_advance)
    engine.start_round()
    engine.submit_input(Side.A, "a")
    engine.submit_input(Side.B, "j")
    engine.submit_input(Side.A, "a")
    engine.submit_input(Side.B, "j")
    
    assert engine.state.current_round == 3
    assert engine.is_round_active
    assert not any(isinstance(event, MatchEnded) for event in events)


def test_failing_listener_does_not_break_engine(make_engine, events):
    engine = make_engine()
    
    def broken(event):
        raise RuntimeError("display unavailable")
    
    engine.add_listener(broken)
    assert engine.initialize(GameMode.PLAYER_VS_PLAYER, 1, "Alice", "Bob")
    play_pvp_round(engine, "a", "l")
    
    assert kinds(events)[-2:] == ["RoundResolved", "MatchEnded"]
    assert engine.is_match_finished


def test_remove_listener(pvp, events):
    assert pvp.remove_listener(events.append)
    assert not pvp.remove_listener(events.append)
    pvp.start_round()
    assert not any(isinstance(event, RoundStarted) for event in events)


def test_reset_match(make_engine, events):
    engine = make_engine(StubRng(ints=[0, 0]))
    engine.initialize(GameMode.PLAYER_VS_COMPUTER, 1, "Alice", "CPU", 0)
    engine.start_round()
    engine.submit_input(Side.A, "p")
    assert engine.is_match_finished
    
    assert engine.reset_match()
    state = engine.state
    assert (state.current_round, state.wins_a, state.wins_b, state.draws) == (0, 0, 0, 0)
    assert state.phase is RoundPhase.IDLE
    assert engine.round_history == []
    assert engine.player(Side.B).opponent_history == ()
    assert events[-1] == MatchInitialized(GameMode.PLAYER_VS_COMPUTER, 1)
    assert engine.start_round()


# ----------------------------------------------------------------------
# 无效参数与重入
# ----------------------------------------------------------------------

@pytest.mark.parametrize("difficulty", ["hard", float("nan"), float("inf"), None])
def test_non_numeric_difficulty_falls_back_to_default(make_engine, difficulty):
    engine = make_engine()
    assert engine.initialize(GameMode.PLAYER_VS_COMPUTER, 3, "Alice", "CPU", difficulty)
    assert engine.player(Side.B).description == "CPU: Medium (Basic Pattern)"


@pytest.mark.parametrize("max_rounds", [None, "5", 2.5, True])
def test_non_integer_max_rounds_is_rejected(make_engine, events, max_rounds):
    engine = make_engine()
    assert not engine.initialize(GameMode.PLAYER_VS_PLAYER, max_rounds, "Alice", "Bob")
    assert not engine.is_initialized
    assert events == []


def test_shared_key_stops_after_listener_resolves_round(clock, events):
    engine = GameEngine(
        clock=clock,
        decision_engine=ComputerDecisionEngine(StubRng()),
        key_bindings={'pvp_b': ('a', 'k', 'l')}
    )
    engine.add_listener(events.append)
    
    def end_on_first_gesture(event):
        if isinstance(event, GestureSubmitted):
            engine.force_end_round()
    
    engine.add_listener(end_on_first_gesture)
    assert engine.initialize(GameMode.PLAYER_VS_PLAYER, 3, "Alice", "Bob")
    engine.start_round()
    engine.process_key("a")
    
    assert kinds(events)[1:] == ["RoundStarted", "GestureSubmitted", "RoundResolved"]
    assert events[-1] == RoundResolved(R, None, Side.A, "Bob forfeited!")
    assert not engine.player(Side.B).has_submitted
