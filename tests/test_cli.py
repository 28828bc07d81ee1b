import json

from typer.testing import CliRunner

from topic_summarizer.cli import app

runner = CliRunner()


def test_summarize_single_document(doc_file, matrix_csv):
    result = runner.invoke(app, ["summarize", str(doc_file), "--embedding", str(matrix_csv)])

    assert result.exit_code == 0, result.output
    assert "The cat and the dog slept." in result.stdout
    assert "The market was calm" not in result.stdout


def test_summarize_with_options_and_config(tmp_path, doc_file, matrix_csv):
    config = tmp_path / "config.json"
    config.write_text(json.dumps({"top_k": 1, "neighbor_k": 2}))

    result = runner.invoke(app, [
        "summarize", str(doc_file), "--embedding", str(matrix_csv),
        "--config", str(config), "--separator", " | ",
    ])

    assert result.exit_code == 0, result.output
    assert result.stdout.strip().count(".") == 1


def test_summarize_reports_failed_documents(tmp_path, doc_file, matrix_csv):
    bad = tmp_path / "latin.txt"
    bad.write_text("Lorem ipsum dolor sit amet. Consectetur adipiscing elit sed.")

    result = runner.invoke(app, ["summarize", str(doc_file), str(bad), "--embedding", str(matrix_csv)])

    assert result.exit_code == 1
    assert "The cat and the dog slept." in result.stdout


def test_summarize_malformed_embedding(tmp_path, doc_file):
    phi = tmp_path / "phi.csv"
    phi.write_text(",cat,dog\nt_1,0.5,\nt_2,0.1,0.9\n")

    result = runner.invoke(app, ["summarize", str(doc_file), "--embedding", str(phi)])
    assert result.exit_code == 2


def test_summarize_non_integer_config_value(tmp_path, doc_file, matrix_csv):
    config = tmp_path / "config.json"
    config.write_text(json.dumps({"top_k": 2.5}))

    result = runner.invoke(app, [
        "summarize", str(doc_file), "--embedding", str(matrix_csv), "--config", str(config),
    ])
    assert result.exit_code == 2


def test_summarize_prints_bracketed_file_names(tmp_path, doc_file, matrix_csv):
    draft = tmp_path / "notes[draft].txt"
    draft.write_text(doc_file.read_text())

    result = runner.invoke(app, ["summarize", str(doc_file), str(draft), "--embedding", str(matrix_csv)])

    assert result.exit_code == 0, result.output
    assert "notes[draft].txt" in result.stdout


def test_summarize_bad_option(doc_file, matrix_csv):
    result = runner.invoke(app, ["summarize", str(doc_file), "--embedding", str(matrix_csv), "--top-k", "0"])
    assert result.exit_code == 2


def test_inspect(matrix_csv):
    result = runner.invoke(app, ["inspect", str(matrix_csv), "--terms", "3"])

    assert result.exit_code == 0, result.output
    assert "Vocabulary size" in result.stdout
    assert "yes" in result.stdout
