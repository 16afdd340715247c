from pathlib import Path

from rent_ledger.cli import main


def run(tmp_path: Path, *args: str) -> int:
    return main(["--data-dir", str(tmp_path), *args])


def test_tenancy_payment_and_overdue_flow(tmp_path: Path, capsys):
    assert run(tmp_path, "add-tenancy", "101", "--tenant", "Aarav Sharma", "--start", "2081-01", "--rent", "12000", "--water", "500") == 0
    assert run(tmp_path, "pay", "101", "--units", "40", "--paid", "13020") == 0
    out = capsys.readouterr().out
    assert "Payment for Baisakh 2081" in out
    assert "Status: completed" in out

    assert run(tmp_path, "overdue", "--as-of", "2081-03") == 0
    out = capsys.readouterr().out
    assert "Room 101 (Aarav Sharma): OVERDUE" in out
    assert "- Jestha 2081: no payment" in out
    assert "- Ashadh 2081: no payment" in out


def test_statement_exports(tmp_path: Path, capsys):
    run(tmp_path, "add-tenancy", "101", "--tenant", "Sita", "--start", "2081-01", "--rent", "12000", "--water", "500")
    run(tmp_path, "pay", "101", "--month", "2081-01", "--units", "40", "--paid", "10000")
    csv_path = tmp_path / "statement.csv"
    html_path = tmp_path / "statement.html"

    assert run(tmp_path, "statement", "101", "--csv", str(csv_path), "--html", str(html_path)) == 0

    out = capsys.readouterr().out
    assert "Outstanding: 3020.00" in out
    assert csv_path.read_text(encoding="utf-8").startswith("month,month_name")
    assert "<table>" in html_path.read_text(encoding="utf-8")


def test_activity_listing(tmp_path: Path, capsys):
    run(tmp_path, "add-tenancy", "202", "--tenant", "Mina", "--start", "2081-04", "--rent", "18000")
    capsys.readouterr()

    assert run(tmp_path, "activity") == 0
    assert "[tenancy_created]" in capsys.readouterr().out


def test_ledger_errors_exit_with_code_2(tmp_path: Path, capsys, monkeypatch):
    monkeypatch.delenv("RENT_LEDGER_CURRENT_PERIOD", raising=False)
    assert run(tmp_path, "pay", "999", "--units", "1", "--paid", "1") == 2
    assert "No tenancy registered" in capsys.readouterr().err

    assert run(tmp_path, "overdue") == 2


def test_end_tenancy_and_set_price(tmp_path: Path, capsys):
    run(tmp_path, "add-tenancy", "101", "--tenant", "Sita", "--start", "2081-01", "--rent", "12000", "--water", "500")
    run(tmp_path, "add-tenancy", "102", "--tenant", "Hari", "--start", "2081-01", "--rent", "9000")
    capsys.readouterr()

    assert run(tmp_path, "set-price", "102", "--rent", "9500", "--water", "300") == 0
    assert "Room 102: rent 9500, water 300" in capsys.readouterr().out

    assert run(tmp_path, "end-tenancy", "101", "--end", "2081-02") == 0
    assert "Sita until Jestha 2081" in capsys.readouterr().out

    assert run(tmp_path, "overdue", "--as-of", "2081-04") == 0
    out = capsys.readouterr().out
    assert "Room 101" not in out
    assert "Room 102 (Hari): OVERDUE" in out

    assert run(tmp_path, "activity") == 0
    out = capsys.readouterr().out
    assert "[tenancy_ended]" in out
    assert "[tenancy_updated]" in out

    assert run(tmp_path, "set-price", "102") == 2
    assert run(tmp_path, "end-tenancy", "101", "--end", "2081-03") == 2


def test_oversized_amount_is_a_clean_error(tmp_path: Path, capsys):
    run(tmp_path, "add-tenancy", "101", "--tenant", "Sita", "--start", "2081-01", "--rent", "12000")
    capsys.readouterr()

    assert run(tmp_path, "pay", "101", "--units", "1e30", "--paid", "0") == 2
    assert "too large" in capsys.readouterr().err
