from __future__ import annotations

import pytest

from sentinel_zone.geometry import Point
from sentinel_zone.roi import DEFAULT_ROI_VERTICES, RegionOfInterest, ROIModel, scale_roi


def test_default_region_is_centered_rectangle() -> None:
    roi = RegionOfInterest.default()
    assert roi.vertices == DEFAULT_ROI_VERTICES
    assert roi.scale(1000, 1000) == (
        Point(200, 200),
        Point(800, 200),
        Point(800, 800),
        Point(200, 800),
    )


def test_scaling_is_linear_per_axis() -> None:
    roi = RegionOfInterest.from_points([[0.1, 0.5], [0.9, 0.5], [0.5, 1.0]])
    scaled = scale_roi(roi, 640, 480)
    expected = [(64, 240), (576, 240), (320, 480)]
    for point, (x, y) in zip(scaled, expected):
        assert point.x == pytest.approx(x)
        assert point.y == pytest.approx(y)

    doubled = roi.scale(1280, 960)
    for a, b in zip(scaled, doubled):
        assert b.x == pytest.approx(2 * a.x)
        assert b.y == pytest.approx(2 * a.y)


def test_scaling_follows_frame_size_changes() -> None:
    roi = RegionOfInterest.default()
    landscape = roi.scale(1920, 1080)
    portrait = roi.scale(1080, 1920)
    assert landscape[0] == Point(384, 216)
    assert portrait[0] == Point(216, 384)


def test_region_needs_three_vertices() -> None:
    with pytest.raises(ValueError, match="at least 3 vertices"):
        RegionOfInterest.from_points([(0, 0), (1, 1)])


def test_region_is_immutable() -> None:
    roi = RegionOfInterest.default()
    with pytest.raises(AttributeError):
        roi.vertices = ()  # type: ignore[misc]


def test_model_starts_with_default_region() -> None:
    model = ROIModel()
    assert model.current == RegionOfInterest.default()
    assert model.version == 0


def test_set_roi_replaces_region_wholesale() -> None:
    model = ROIModel()
    snapshot = model.current

    replaced = model.set_roi([(0, 0), (1, 0), (1, 1)])

    assert model.current == replaced
    assert len(model.current) == 3
    assert model.version == 1
    # Value handed out earlier is untouched
    assert snapshot == RegionOfInterest.default()


def test_invalid_replacement_keeps_previous_region() -> None:
    model = ROIModel()
    with pytest.raises(ValueError):
        model.set_roi([(0, 0), (1, 1)])
    assert model.current == RegionOfInterest.default()
    assert model.version == 0


def test_reset_restores_default() -> None:
    model = ROIModel(roi=RegionOfInterest.from_points([(0, 0), (1, 0), (1, 1)]))
    model.reset()
    assert model.current == RegionOfInterest.default()
    assert model.scale(100, 100)[0] == Point(20, 20)
