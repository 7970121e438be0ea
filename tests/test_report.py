import logging

import plotly.graph_objects as go
import pytest

import report_settings
from correlation_utils.exceptions import InvalidParameterError, SubsampleSizeError
from correlation_utils.report import (
    _markdown_to_html,
    build_reminder_figures,
    build_report_sections,
    export_report_html,
    render_report_html
)


@pytest.fixture(scope='module')
def sections():
    return build_report_sections()


def test_three_reminders_in_order(sections):
    assert [section.title.split(':')[0] for section in sections] == [
        'Reminder 1', 'Reminder 2', 'Reminder 3'
    ]
    for section in sections:
        assert isinstance(section.figure, go.Figure)
        assert section.narrative.strip()
        assert section.table is not None


def test_sample_size_table_follows_settings(sections):
    table = sections[1].table
    assert table['n'].tolist() == list(report_settings.SUBSAMPLE_SIZES)
    assert table['abs_delta'].iloc[0] > table['abs_delta'].iloc[-1]
    assert table['abs_delta'].is_monotonic_decreasing


def test_method_table_shows_rank_methods_more_stable(sections):
    shift = sections[2].table['shift']
    assert shift['Kendall τ'] < shift['Pearson r']
    assert shift['Spearman ρ'] < shift['Pearson r']


def test_report_is_reproducible(sections):
    again = build_report_sections()
    for first, second in zip(sections, again):
        assert first.table.equals(second.table)


def test_reminder_figures_keyed_by_title():
    figures = build_reminder_figures()
    assert len(figures) == 3
    assert all(isinstance(fig, go.Figure) for fig in figures.values())


def test_html_contains_every_section(sections):
    document = render_report_html(sections)
    assert document.startswith('<!DOCTYPE html>')
    for section in sections:
        assert section.title in document
    assert '<strong>' in document
    assert 'cdn.plot.ly' in document


def test_export_writes_file(sections, tmp_path):
    path = export_report_html(tmp_path / 'report.html', sections)
    assert path.exists()
    assert 'Reminder 3: rank-based coefficients resist outliers' in path.read_text(encoding='utf-8')


def test_failing_step_is_logged_and_nothing_written(monkeypatch, tmp_path, caplog):
    monkeypatch.setattr(report_settings, 'SUBSAMPLE_SIZES', (15, report_settings.BIVARIATE_SIZE + 1))
    path = tmp_path / 'report.html'

    with caplog.at_level(logging.ERROR, logger='correlation_utils.report'):
        with pytest.raises(SubsampleSizeError):
            export_report_html(path)

    assert "outlier vs sample size" in caplog.text
    assert not path.exists()


def test_invalid_covariance_fails_the_run(monkeypatch):
    monkeypatch.setattr(report_settings, 'BIVARIATE_COV', ((1.0, 2.0), (2.0, 1.0)))
    with pytest.raises(InvalidParameterError):
        build_report_sections()


def test_narrative_blank_lines_become_paragraphs():
    text = """
    First paragraph
    spans two lines.

    Second one is **bold**.
    """
    assert _markdown_to_html(text) == (
        "<p>First paragraph spans two lines.</p>\n"
        "<p>Second one is <strong>bold</strong>.</p>"
    )
