from pathlib import Path
from webagent.config import load_settings, PROFILES

def test_instant_defaults():
    s = load_settings(config=str(Path("config")), profile="instant")
    assert s.general.profile == "instant"
    assert s.general.default_platform == "linkedin"
    assert s.pacing.event_pacing_ms == 0
    assert s.pacing.step_delay_ms == 0
    assert s.executor.honor_waits is False
    assert s.web.port == 8765

def test_demo_reproduces_original_pacing():
    s = load_settings(config=str(Path("config")), profile="demo")
    assert s.pacing.event_pacing_ms == 100
    assert s.pacing.parse_delay_ms == 800
    assert s.pacing.plan_delay_ms == 600
    assert s.pacing.step_delay_ms == 1000
    assert s.executor.honor_waits is True

def test_overrides_and_unknown_keys(tmp_path: Path):
    (tmp_path / "defaults.toml").write_text(
        '[general]\ndefault_platform = "gmail"\nbogus = 1\n[pacing]\nstep_delay_ms = 5\n', encoding="utf-8"
    )
    s = load_settings(config=str(tmp_path), profile="instant", overrides={"log_dir": "x/logs", "nope": 1})
    assert s.general.default_platform == "gmail"
    assert s.general.log_dir == "x/logs"
    assert s.pacing.step_delay_ms == 5
    assert "instant" in PROFILES

def test_kill_switch_env(monkeypatch):
    monkeypatch.setenv("WEBAGENT_KILL_SWITCH", "elsewhere/kill")
    s = load_settings(config="config", profile="instant")
    assert s.general.kill_switch_path == "elsewhere/kill"
