from __future__ import annotations

import numpy as np
from conftest import make_frame, person

from sentinel_zone.pipeline import evaluate_frame
from sentinel_zone.rendering import IntrusionVisualizer
from sentinel_zone.rendering.visualizer import to_detections
from sentinel_zone.roi import RegionOfInterest


def _evaluation(objects):
    frame = make_frame(0, width=320, height=240, with_image=True)
    return evaluate_frame(frame, RegionOfInterest.default(), objects)


def test_annotate_preserves_shape_and_source() -> None:
    evaluation = _evaluation([person(100, 100, 40, 60), person(0, 0, 20, 20)])
    scene = evaluation.image

    annotated = IntrusionVisualizer().annotate(scene, evaluation)

    assert annotated.shape == scene.shape
    assert annotated.dtype == np.uint8
    assert annotated.any()
    # Source frame is left untouched
    assert not scene.any()


def test_alert_boxes_drawn_in_red() -> None:
    evaluation = _evaluation([person(100, 100, 40, 60)])
    visualizer = IntrusionVisualizer(show_status=False, alert_opacity=0.0)

    annotated = visualizer.annotate(evaluation.image, evaluation)

    # BGR pure red from the alert box, no green safe box
    red = np.all(annotated == (0, 0, 255), axis=-1)
    green = np.all(annotated == (0, 255, 0), axis=-1)
    assert red[110:150, 95:105].any()
    assert not green[110:150, 95:105].any()


def test_overlay_matches_frame_size() -> None:
    evaluation = _evaluation([])
    overlay = IntrusionVisualizer().overlay(evaluation)
    assert overlay.shape == (240, 320, 3)
    assert overlay.any()


def test_to_detections() -> None:
    evaluation = _evaluation([person(100, 100, 40, 60), person(0, 0, 20, 20)])
    detections = to_detections(list(evaluation.classifications))

    assert len(detections) == 2
    assert detections.xyxy[0].tolist() == [100, 100, 140, 160]
    assert len(to_detections([])) == 0


def test_mixed_groups_draw_both_colors() -> None:
    # Several boxes per group exercise per-index color lookup
    evaluation = _evaluation([
        person(100, 100, 40, 60),
        person(150, 90, 20, 20),
        person(0, 0, 20, 20),
        person(280, 200, 30, 30),
    ])
    visualizer = IntrusionVisualizer(show_status=False, safe_opacity=0.0, alert_opacity=0.0)

    annotated = visualizer.draw_classifications(
        evaluation.image.copy(), list(evaluation.classifications)
    )

    red = np.all(annotated == (0, 0, 255), axis=-1)
    green = np.all(annotated == (0, 255, 0), axis=-1)
    assert red[110:150, 95:105].any()
    assert green[205:225, 275:285].any()
