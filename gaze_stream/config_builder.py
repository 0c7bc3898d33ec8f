# gaze_stream/config_builder.py
"""Build configuration objects from CLI arguments.

Separates configuration construction from argument parsing (SRP).
"""
from __future__ import annotations

import argparse
from typing import Dict

import pandas as pd

from .config import (
    BufferConfig,
    ClassificationConfig,
    DetectorConfig,
    SpeedConfig,
    StreamConfig,
)


class ConfigBuilder:
    """Builds configuration objects from parsed CLI arguments.

    Responsibilities:
        - Map CLI arguments to configuration dataclasses
        - Resolve the line geometry options
        - Provide single source of truth for config construction
    """

    @staticmethod
    def build_buffer_config(args: argparse.Namespace) -> BufferConfig:
        return BufferConfig(
            max_capacity=args.capacity,
            diagnostic_interval=args.diagnostic_interval,
        )

    @staticmethod
    def build_classification_config(args: argparse.Namespace) -> ClassificationConfig:
        return ClassificationConfig(
            fallback_velocity_threshold=None if args.no_fallback_classification else args.fallback_threshold,
        )

    @staticmethod
    def build_detector_config(args: argparse.Namespace) -> DetectorConfig:
        return DetectorConfig(
            valley_velocity_threshold=args.valley_threshold,
            cascade_window_ms=args.cascade_window_ms,
            refractory_ms=args.refractory_ms,
            pending_timeout_ms=args.pending_timeout_ms,
        )

    @staticmethod
    def build_speed_config(args: argparse.Namespace) -> SpeedConfig:
        return SpeedConfig(
            max_scan_samples=args.max_scan_samples,
            min_line_duration_ms=args.min_line_duration_ms,
        )

    @classmethod
    def build_stream_config(cls, args: argparse.Namespace) -> StreamConfig:
        """
        Build the complete processor configuration.

        Args:
            args: argparse.Namespace

        Returns:
            StreamConfig
        """
        return StreamConfig(
            buffer=cls.build_buffer_config(args),
            classification=cls.build_classification_config(args),
            detector=cls.build_detector_config(args),
            speed=cls.build_speed_config(args),
        )

    @staticmethod
    def build_line_words(args: argparse.Namespace) -> Dict[int, int]:
        """
        Word count per line from ``--layout`` (TSV with ``line`` and
        ``word_count`` columns) or a uniform ``--words-per-line``.
        """
        if args.layout:
            layout = pd.read_csv(args.layout, sep="\t")
            if "line" not in layout.columns or "word_count" not in layout.columns:
                raise ValueError("Layout TSV must contain 'line' and 'word_count' columns.")
            return {int(r.line): int(r.word_count) for r in layout.itertuples(index=False)}
        if args.words_per_line:
            return {line: args.words_per_line for line in range(1, args.max_lines + 1)}
        return {}
