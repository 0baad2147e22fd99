"""Tests for resume planning."""

import pytest
from pathlib import Path

from sub_translator.models import Caption, SubtitleDocument
from sub_translator.parser import parse_srt, save_srt, serialize_srt
from sub_translator.resume import CheckpointMismatchError, load_checkpoint, plan_resume


def make_source(count):
    return SubtitleDocument(
        [Caption(i * 1000, i * 1000 + 800, [f"Line {i}"]) for i in range(count)]
    )


def translated_prefix(source, count):
    return SubtitleDocument(
        [c.copy(lines=[f"Linha {i}"]) for i, c in enumerate(source[:count])]
    )


class TestPlanResume:

    def test_no_checkpoint(self):
        source = make_source(5)
        plan = plan_resume(source, None)

        assert plan.cursor == 0
        assert plan.captions == source.captions
        assert plan.pending == 5

    def test_partial_checkpoint(self):
        source = make_source(20)
        checkpoint = parse_srt(serialize_srt(translated_prefix(source, 7)))

        plan = plan_resume(source, checkpoint)

        assert plan.cursor == 7
        assert plan.total == 20
        assert serialize_srt(plan.captions[:7]) == serialize_srt(checkpoint)
        assert plan.captions[7:] == source.captions[7:]

    def test_source_not_modified(self):
        source = make_source(3)
        plan = plan_resume(source, translated_prefix(source, 2))
        plan.captions[0].lines.append("changed")

        assert source[0].lines == ["Line 0"]

    def test_complete_checkpoint(self):
        source = make_source(3)
        plan = plan_resume(source, translated_prefix(source, 3))
        assert plan.is_complete

    def test_checkpoint_longer_than_source(self):
        with pytest.raises(CheckpointMismatchError):
            plan_resume(make_source(2), make_source(3))

    def test_trusts_checkpoint_by_default(self):
        """Content is not compared; a checkpoint from another file is accepted."""
        source = make_source(5)
        other = SubtitleDocument([Caption(99000, 99500, ["Elsewhere"])])

        plan = plan_resume(source, other)

        assert plan.cursor == 1
        assert plan.captions[0].lines == ["Elsewhere"]

    def test_verify_rejects_mismatched_timecodes(self):
        source = make_source(5)
        other = SubtitleDocument([Caption(99000, 99500, ["Elsewhere"])])

        with pytest.raises(CheckpointMismatchError, match="Caption 1"):
            plan_resume(source, other, verify=True)

    def test_verify_accepts_matching_timecodes(self):
        source = make_source(5)
        plan = plan_resume(source, translated_prefix(source, 2), verify=True)
        assert plan.cursor == 2


class TestLoadCheckpoint:

    def test_missing(self, tmp_path):
        assert load_checkpoint(tmp_path / "nope-pt.srt") is None

    def test_existing(self, tmp_path):
        path = tmp_path / "movie-pt.srt"
        save_srt(make_source(4).captions, path)
        assert len(load_checkpoint(path)) == 4
