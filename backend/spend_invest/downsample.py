"""Largest-Triangle-Three-Buckets downsampling for chart series."""
from __future__ import annotations

import math
from typing import Callable, List, Sequence, TypeVar

from .models import GraphPoint

T = TypeVar("T")

DEFAULT_TARGET = 500


def _graph_value(point: GraphPoint) -> float:
    return point.value


def largest_triangle_three_buckets(
    data: Sequence[T],
    threshold: int,
    value_of: Callable[[T], float] = _graph_value,  # type: ignore[assignment]
) -> List[T]:
    """Reduce ``data`` to ``threshold`` points while keeping visual extremes.

    The first and last points are always kept. Every bucket in between
    contributes the point forming the largest triangle with the previously
    selected point and the average of the following bucket. The x coordinate
    is the ordinal index, which assumes one point per calendar day.

    A ``threshold`` of 0 disables downsampling. Any other threshold below 3,
    negative ones included, keeps only the endpoints.
    """

    length = len(data)
    if threshold == 0 or threshold >= length or length <= 2:
        return list(data)
    if threshold < 3:
        return [data[0], data[-1]]

    every = (length - 2) / (threshold - 2)
    sampled: List[T] = [data[0]]
    a = 0

    for i in range(threshold - 2):
        avg_start = math.floor((i + 1) * every) + 1
        avg_end = min(math.floor((i + 2) * every) + 1, length)
        if avg_end <= avg_start:
            avg_end = min(avg_start + 1, length)
        avg_length = avg_end - avg_start
        avg_x = sum(range(avg_start, avg_end)) / avg_length
        avg_y = sum(value_of(data[j]) for j in range(avg_start, avg_end)) / avg_length

        range_start = math.floor(i * every) + 1
        range_end = math.floor((i + 1) * every) + 1

        point_a_x = a
        point_a_y = value_of(data[a])

        max_area = -1.0
        next_a = range_start
        for j in range(range_start, range_end):
            area = abs(
                (point_a_x - avg_x) * (value_of(data[j]) - point_a_y)
                - (point_a_x - j) * (avg_y - point_a_y)
            ) * 0.5
            if area > max_area:
                max_area = area
                next_a = j

        sampled.append(data[next_a])
        a = next_a

    sampled.append(data[-1])
    return sampled


def downsample(series: Sequence[T], target_count: int = DEFAULT_TARGET) -> List[T]:
    """Downsample a daily chart series for rendering."""

    return largest_triangle_three_buckets(series, target_count)


__all__ = ["DEFAULT_TARGET", "downsample", "largest_triangle_three_buckets"]
