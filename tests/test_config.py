"""Tests for settings loading and the batch entry point."""

from __future__ import annotations

import json

import pytest

from sketch_recognition.config import Settings, load_settings, settings_from_dict
from sketch_recognition.exceptions import ConfigurationError
from sketch_recognition.types import RecognitionResult

import main as batch

from . import image_factory as factory


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "BAIDU_API_KEY",
        "BAIDU_SECRET_KEY",
        "BAIDU_ENABLED",
        "DOUBAO_API_KEY",
        "DOUBAO_ENABLED",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_missing_config_file_gives_defaults(tmp_path):
    settings = load_settings(tmp_path / "absent.json")
    assert settings == Settings()
    assert settings.delay_range == (0.4, 0.8)
    assert settings.baidu.enabled is False


def test_config_file_is_parsed(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "recognition": {"backend": "mock", "seed": 3, "delay_ms": 0},
                "preprocessing": {"sketch_size": [500, 400], "simplify_threshold": 180},
                "baidu": {"enabled": True, "api_key": "k", "secret_key": "s", "endpoint": "handwriting"},
                "logging": {"level": "DEBUG"},
            }
        ),
        encoding="utf-8",
    )
    settings = load_settings(path)
    assert settings.backend == "mock"
    assert settings.seed == 3
    assert settings.delay_range == (0.0, 0.0)
    assert settings.sketch_size == (500, 400)
    assert settings.simplify_threshold == 180
    assert settings.baidu.endpoint == "handwriting"
    assert settings.baidu.has_credentials
    assert settings.log_level == "DEBUG"


def test_environment_overrides_credentials(monkeypatch):
    monkeypatch.setenv("BAIDU_API_KEY", "env-key")
    monkeypatch.setenv("BAIDU_SECRET_KEY", "env-secret")
    monkeypatch.setenv("BAIDU_ENABLED", "true")
    settings = settings_from_dict({"baidu": {"api_key": "file-key"}})
    assert settings.baidu.api_key == "env-key"
    assert settings.baidu.secret_key == "env-secret"
    assert settings.baidu.enabled is True


@pytest.mark.parametrize(
    "config",
    [
        {"preprocessing": {"simplify_threshold": 300}},
        {"recognition": {"delay_ms": "slow"}},
    ],
)
def test_invalid_values_are_rejected(config):
    with pytest.raises(ConfigurationError):
        settings_from_dict(config)


def test_malformed_json_is_rejected(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{broken", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_settings(path)


def test_non_utf8_config_is_rejected(tmp_path):
    path = tmp_path / "config.json"
    path.write_bytes(b"\xff\xfe{")
    with pytest.raises(ConfigurationError):
        load_settings(path)


def test_null_sections_give_defaults():
    settings = settings_from_dict(
        {"recognition": None, "preprocessing": None, "baidu": None, "doubao": None, "logging": None}
    )
    assert settings == Settings()


def test_doubao_section_and_environment(monkeypatch):
    settings = settings_from_dict({"doubao": {"enabled": True, "api_key": "file-key", "model": "vision-pro"}})
    assert settings.doubao.enabled is True
    assert settings.doubao.api_key == "file-key"
    assert settings.doubao.model == "vision-pro"
    assert settings.doubao.url.endswith("/chat/completions")

    monkeypatch.setenv("DOUBAO_API_KEY", "env-key")
    monkeypatch.setenv("DOUBAO_ENABLED", "0")
    overridden = settings_from_dict({"doubao": {"enabled": True, "api_key": "file-key"}})
    assert overridden.doubao.api_key == "env-key"
    assert overridden.doubao.enabled is False


def test_batch_analysis_writes_report(tmp_path, monkeypatch):
    images = tmp_path / "drawings"
    images.mkdir()
    (images / "a.png").write_bytes(factory.to_png(factory.create_sketch_image()))
    (images / "b.png").write_bytes(factory.to_png(factory.create_canvas_export()))
    (images / "notes.txt").write_text("ignored", encoding="utf-8")
    config = tmp_path / "config.json"
    config.write_text(json.dumps({"recognition": {"seed": 1, "delay_ms": 0}}), encoding="utf-8")
    monkeypatch.setattr(batch, "__file__", str(tmp_path / "main.py"))

    batch.main([str(images), str(config)])

    report = json.loads((tmp_path / "analysis_results.json").read_text(encoding="utf-8"))
    assert sorted(report["results"]) == ["a.png", "b.png"]
    assert report["summary"]["total"] == 2
    assert report["summary"]["recognized"] == 2


def test_summary_counts_failures():
    results = {
        "a.png": RecognitionResult(success=True, prediction="cat", confidence=60, category="animals").to_dict(),
        "b.png": RecognitionResult.failure("recognition failed: broken").to_dict(),
    }
    summary = batch.summarize(results)
    assert summary == {"total": 2, "recognized": 1, "failed": 1, "categories": {"animals": 1}}
