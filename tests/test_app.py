"""
命令行宿主测试
Console Host Tests
"""
import io
import signal

import pytest
import yaml

from rps_duel.app import Application
from rps_duel.main import build_parser, main


@pytest.fixture(autouse=True)
def keep_signal_handlers(monkeypatch):
    monkeypatch.setattr(signal, "signal", lambda *args: None)


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({
        'game': {
            'mode': 'pvp',
            'max_rounds': 3,
            'countdown_seconds': 600,
            'player_names': {'a': 'Alice', 'b': 'Bob'},
        },
        'logging': {'level': 'WARNING'},
    }), encoding="utf-8")
    return str(path)


def run_app(config_path, lines, overrides=None):
    output = io.StringIO()
    app = Application(config_path=config_path, overrides=overrides,
                      input_stream=io.StringIO(lines), output=output)
    assert app.start()
    return app, output.getvalue()


def test_pvp_match_to_completion(config_path):
    app, text = run_app(config_path, "a\nl\nal\n")
    
    assert "=== Player vs Player, best of 3 ===" in text
    assert "Alice: A=Rock, S=Paper, D=Scissors" in text
    assert "--- Round 1" in text
    assert "Rock beats Scissors" in text
    assert "Final score 2:0" in text
    assert "Alice wins the match!" in text
    assert app.engine.is_match_finished
    assert not app.is_running


def test_quit_command_stops_loop(config_path):
    app, text = run_app(config_path, "a\nq\nl\n")
    assert app.engine.state.current_round == 1
    assert app.engine.is_round_active
    assert "Final score" not in text


def test_overrides_take_precedence(config_path):
    app, text = run_app(config_path, "aj\n", overrides={'max_rounds': 1})
    assert "best of 1" in text
    assert "It's a tie!" in text
    assert "The match is a draw!" in text


def test_repeated_key_in_one_line_is_held_until_line_ends(config_path):
    app = Application(config_path=config_path, input_stream=io.StringIO("aaj\nl\n"),
                      output=io.StringIO())
    assert app.initialize()
    
    pressed = []
    process_key = app.engine.process_key
    
    def record(symbol):
        pressed.append(symbol)
        return process_key(symbol)
    
    app.engine.process_key = record
    app.run()
    
    assert pressed == ["a", "j", "l"]
    assert app.engine.state.current_round == 2


def test_invalid_override_fails_initialize(config_path):
    app = Application(config_path=config_path, overrides={'max_rounds': 0},
                      input_stream=io.StringIO(""), output=io.StringIO())
    assert not app.initialize()
    assert app.engine is None


def test_run_without_initialize_does_nothing(config_path):
    app = Application(config_path=config_path, input_stream=io.StringIO("a\n"),
                      output=io.StringIO())
    app.run()
    assert app.engine is None


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert args.config is None
    assert args.mode is None
    assert args.rounds is None


def test_main_runs_until_input_ends(config_path, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    assert main(["--config", config_path, "--mode", "pvc", "--difficulty", "2", "--seed", "5"]) == 0
