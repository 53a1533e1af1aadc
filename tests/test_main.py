import json
from random import Random

import pytest

import main
import settings_generator
from debug import Debug


def run(capsys, *argv):
    main.main(list(argv))
    return capsys.readouterr().out


def test_encrypt_then_decrypt(capsys):
    ciphertext = run(capsys, "-q", "encrypt", "SUBMARINE").strip()
    assert len(ciphertext) == 9
    assert run(capsys, "-q", "decrypt", ciphertext).strip() == "SUBMARINE"


def test_encrypt_keeps_spacing_and_blocks(capsys):
    spaced = run(capsys, "-q", "encrypt", "attack at dawn").strip()
    assert spaced[6] == " " and spaced[9] == " "
    grouped = run(capsys, "-q", "encrypt", "attack at dawn", "--blocks").strip()
    assert grouped == " ".join([spaced.replace(" ", "")[:5], spaced.replace(" ", "")[5:10],
                                spaced.replace(" ", "")[10:]])


def test_explicit_machine_settings(capsys):
    args = ["--rotors", "IV", "ii", "V", "--positions", "QEV", "--rings", "BCD",
            "--plugboard", "AB CD", "--reflector", "C"]
    ciphertext = run(capsys, "-q", "encrypt", "HELLOWORLD", *args).strip()
    assert run(capsys, "-q", "decrypt", ciphertext, *args).strip() == "HELLOWORLD"


def test_key_sheet_round_trip(capsys, tmp_path):
    sheet = tmp_path / "key.json"
    sheet.write_text(json.dumps(settings_generator.make_key_sheet(Random(3))), encoding="utf-8")

    ciphertext = run(capsys, "-q", "encrypt", "WEATHER REPORT", "--config", str(sheet)).strip()
    assert run(capsys, "-q", "decrypt", ciphertext, "--config", str(sheet)).strip() == "WEATHER REPORT"


def test_key_sheet_rings_are_one_based():
    engine = main.engine_from_config({
        "rotors": ["I", "II", "III"],
        "reflector": "B",
        "ring_set": [1, 2, 26],
        "plugs": "AZ BY",
        "master_key": "QEV",
    })
    assert [r.ring for r in engine.rotors] == [0, 1, 25]
    assert engine.window == "QEV"


def test_load_config_reports_missing_keys(tmp_path):
    sheet = tmp_path / "key.json"
    sheet.write_text(json.dumps({"rotors": ["I", "II", "III"]}), encoding="utf-8")
    with pytest.raises(ValueError, match="master_key"):
        main.load_config(sheet)


def test_bad_settings_exit_with_message(capsys):
    with pytest.raises(SystemExit) as exc:
        main.main(["-q", "encrypt", "X", "--rotors", "I", "I", "II"])
    assert "distinct" in str(exc.value.code)


def test_missing_key_sheet_exits(tmp_path):
    with pytest.raises(SystemExit):
        main.main(["-q", "encrypt", "X", "--config", str(tmp_path / "nope.json")])


def test_analyze(capsys):
    out = run(capsys, "analyze", "THE THE")
    assert "Letters:         6" in out
    assert "Trigram count:   2" in out


def test_hillclimb_command(capsys, ciphertext):
    out = run(capsys, "-q", "hillclimb", ciphertext, "--catalog", "I", "II", "III",
              "--letters", "ABCD", "-n", "50", "--seed", "1")
    assert "Hill climb best configuration:" in out
    assert "Hill climb fitness:" in out


def test_exhaustive_command(capsys, ciphertext, secret):
    out = run(capsys, "-q", "exhaustive", ciphertext, "--catalog", "I", "II", "III",
              "--letters", "abcd")
    assert "(384 combinations)" in out
    assert str(secret) in out


def test_default_logging_switches():
    main.main(["-q", "analyze", "X"])
    status = Debug().status()
    assert status["search"] and status["progress"]
    assert not status["stepping"]
    assert not Debug().enabled


def test_key_generator_is_seeded(tmp_path, capsys):
    a, b = tmp_path / "a.json", tmp_path / "b.json"
    settings_generator.main(["--seed", "4", "--outfile", str(a)])
    settings_generator.main(["--seed", "4", "--outfile", str(b), "--pairs", "10"])
    assert a.read_text() == b.read_text()

    cfg = main.load_config(a)
    assert len(set(cfg["rotors"])) == 3
    assert len(cfg["plugs"]) == 10
    assert len(cfg["master_key"]) == 3
    assert all(1 <= r <= 26 for r in cfg["ring_set"])


def test_choose_pairs_are_disjoint():
    pairs = settings_generator.choose_pairs("ABCDEFGHIJ", 20, Random(0))
    assert len(pairs) == 5
    assert len(set("".join(pairs))) == 10
