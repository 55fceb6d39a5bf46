# tests/test_cli.py
# ============================================================
# Unit Tests — Command Line Interface
# ============================================================
# The converter's decoder is swapped for a fake document so the
# commands run without poppler.
# ============================================================

import io
import logging
import signal
import zipfile

import pytest
from typer.testing import CliRunner

import cli.main as cli_main
from pagezip.pipeline.cancel import CancelToken
from pagezip.pipeline.orchestrator import PdfConverter

from tests.conftest import FakeDocument, FakePage

runner = CliRunner()


class InterruptingDocument(FakeDocument):
    """Delivers Ctrl-C to the running command while page 1 is being fetched."""

    def get_page(self, number):
        if number == 1:
            handler = signal.getsignal(signal.SIGINT)
            handler(signal.SIGINT, None)
        return super().get_page(number)


@pytest.fixture
def fake_converter(monkeypatch):
    """Make the CLI build converters that decode into a 3-page fake document."""
    created = []

    def factory(settings):
        converter = PdfConverter(
            settings=settings,
            decoder=lambda data: FakeDocument([FakePage(i) for i in (1, 2, 3)]),
        )
        created.append(converter)
        return converter

    monkeypatch.setattr(cli_main, "PdfConverter", factory)
    return created


@pytest.fixture
def input_pdf(tmp_path):
    path = tmp_path / "report.pdf"
    path.write_bytes(b"%PDF-1.7 placeholder")
    return path


class TestConvertCommand:
    """Test `pagezip convert`."""

    def test_writes_archive(self, fake_converter, input_pdf, tmp_path):
        out_dir = tmp_path / "out"
        result = runner.invoke(cli_main.app, ["convert", str(input_pdf), "-o", str(out_dir)])

        assert result.exit_code == 0, result.output
        archive = out_dir / "report_images.zip"
        assert archive.exists()
        with zipfile.ZipFile(io.BytesIO(archive.read_bytes())) as zf:
            assert zf.namelist() == [
                "report_page_1.png",
                "report_page_2.png",
                "report_page_3.png",
            ]

    def test_overrides_reach_converter(self, fake_converter, input_pdf, tmp_path):
        result = runner.invoke(
            cli_main.app,
            [
                "convert", str(input_pdf),
                "-o", str(tmp_path),
                "--scale", "1.5",
                "--on-page-error", "abort",
            ],
        )

        assert result.exit_code == 0, result.output
        used = fake_converter[0].settings
        assert used.render_scale == 1.5
        assert used.page_error_policy == "abort"

    def test_writes_previews(self, fake_converter, input_pdf, tmp_path):
        previews = tmp_path / "thumbs"
        result = runner.invoke(
            cli_main.app,
            ["convert", str(input_pdf), "-o", str(tmp_path), "--previews", str(previews)],
        )

        assert result.exit_code == 0, result.output
        assert sorted(p.name for p in previews.iterdir()) == [
            "report_page_1_preview.png",
            "report_page_2_preview.png",
            "report_page_3_preview.png",
        ]

    def test_missing_file(self, tmp_path):
        result = runner.invoke(cli_main.app, ["convert", str(tmp_path / "nope.pdf")])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_non_pdf_rejected(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hello")
        result = runner.invoke(cli_main.app, ["convert", str(path)])
        assert result.exit_code == 1
        assert "Unsupported file format" in result.output

    def test_unknown_policy_rejected(self, input_pdf):
        result = runner.invoke(
            cli_main.app, ["convert", str(input_pdf), "--on-page-error", "retry"]
        )
        assert result.exit_code == 1
        assert "Unknown policy" in result.output

    def test_corrupted_pdf_fails_cleanly(self, input_pdf, tmp_path):
        input_pdf.write_bytes(b"garbage, not a pdf")
        result = runner.invoke(cli_main.app, ["convert", str(input_pdf), "-o", str(tmp_path)])

        assert result.exit_code == 1
        assert "Error" in result.output
        assert not (tmp_path / "report_images.zip").exists()

    def test_cancelled_conversion_exits_130(self, fake_converter, input_pdf, tmp_path, monkeypatch):
        def cancelled_token():
            token = CancelToken()
            token.cancel()
            return token

        monkeypatch.setattr(cli_main, "CancelToken", cancelled_token)
        result = runner.invoke(cli_main.app, ["convert", str(input_pdf), "-o", str(tmp_path)])

        assert result.exit_code == 130
        assert "interrupted" in result.output
        assert not (tmp_path / "report_images.zip").exists()

    def test_ctrl_c_stops_after_current_page(self, input_pdf, tmp_path, monkeypatch):
        doc = InterruptingDocument([FakePage(i) for i in (1, 2, 3)])
        monkeypatch.setattr(
            cli_main,
            "PdfConverter",
            lambda settings: PdfConverter(settings=settings, decoder=lambda data: doc),
        )

        result = runner.invoke(cli_main.app, ["convert", str(input_pdf), "-o", str(tmp_path)])

        assert result.exit_code == 130
        assert doc.requested == [1]
        assert doc.closed
        assert all(s.released for s in doc.surfaces)

    def test_zero_scale_rejected(self, input_pdf):
        result = runner.invoke(cli_main.app, ["convert", str(input_pdf), "--scale", "0"])
        assert result.exit_code == 1
        assert "Scale must be positive" in result.output

    def test_verbose_enables_debug(self, fake_converter, input_pdf, tmp_path):
        root = logging.getLogger("pagezip")
        level = root.level
        try:
            result = runner.invoke(
                cli_main.app, ["--verbose", "convert", str(input_pdf), "-o", str(tmp_path)]
            )
            assert result.exit_code == 0, result.output
            assert root.level == logging.DEBUG
        finally:
            root.setLevel(level)


class TestInfoCommand:
    """Test `pagezip info`."""

    def test_lists_pages(self, make_pdf, tmp_path):
        path = tmp_path / "report.pdf"
        path.write_bytes(make_pdf([(200, 100), (300, 400)]))

        result = runner.invoke(cli_main.app, ["info", str(path)])

        assert result.exit_code == 0, result.output
        assert "2 pages" in result.output
        assert "report_images.zip" in result.output

    @pytest.mark.parametrize("scale", ["0", "-1"])
    def test_non_positive_scale_rejected(self, make_pdf, tmp_path, scale):
        path = tmp_path / "report.pdf"
        path.write_bytes(make_pdf([(200, 100)]))

        result = runner.invoke(cli_main.app, ["info", str(path), f"--scale={scale}"])

        assert result.exit_code == 1
        assert "Scale must be positive" in result.output


class TestCancelOnInterrupt:
    """Test the SIGINT handler installed around a conversion."""

    def test_first_interrupt_cancels_token(self):
        token = CancelToken()
        before = signal.getsignal(signal.SIGINT)

        with cli_main._cancel_on_interrupt(token):
            signal.getsignal(signal.SIGINT)(signal.SIGINT, None)
            assert token.cancelled

        assert signal.getsignal(signal.SIGINT) is before

    def test_second_interrupt_raises(self):
        token = CancelToken()
        with pytest.raises(KeyboardInterrupt):
            with cli_main._cancel_on_interrupt(token):
                handler = signal.getsignal(signal.SIGINT)
                handler(signal.SIGINT, None)
                handler(signal.SIGINT, None)
        assert token.cancelled

    def test_handler_restored_on_error(self):
        before = signal.getsignal(signal.SIGINT)
        with pytest.raises(RuntimeError):
            with cli_main._cancel_on_interrupt(CancelToken()):
                raise RuntimeError("boom")
        assert signal.getsignal(signal.SIGINT) is before
