"""
Tests for reference matching and the descriptor store
"""

import numpy as np
import pytest

from conftest import descriptor_at, make_face


class TestIsAuthorized:
    """Tests for the Euclidean face matcher"""

    def test_distance_below_tolerance_matches(self):
        from proxyguard.proctor.detectors import is_authorized

        reference = [descriptor_at(0.0)]
        assert is_authorized(descriptor_at(0.1), reference, 0.5) is True
        assert is_authorized(descriptor_at(0.49), reference, 0.5) is True

    def test_distance_at_or_above_tolerance_rejects(self):
        from proxyguard.proctor.detectors import is_authorized

        reference = [descriptor_at(0.0)]
        assert is_authorized(descriptor_at(0.5), reference, 0.5) is False
        assert is_authorized(descriptor_at(0.9), reference, 0.5) is False

    def test_empty_reference_never_authorizes(self):
        from proxyguard.proctor.detectors import is_authorized

        assert is_authorized(descriptor_at(0.0), [], 0.5) is False
        assert is_authorized(descriptor_at(0.0), (), 10.0) is False

    def test_any_reference_member_can_match(self):
        from proxyguard.proctor.detectors import is_authorized

        reference = [descriptor_at(5.0, axis=1), descriptor_at(0.0)]
        assert is_authorized(descriptor_at(0.2), reference, 0.5) is True

    def test_euclidean_distance(self):
        from proxyguard.proctor.detectors import euclidean_distance

        a = np.zeros(128)
        b = np.zeros(128)
        b[0], b[1] = 3.0, 4.0
        assert euclidean_distance(a, b) == pytest.approx(5.0)


class TestFaceVerifier:
    """Tests for FaceVerifier"""

    def test_verify_against_store(self):
        from proxyguard.proctor.detectors import FaceVerifier
        from proxyguard.proctor.reference_store import DescriptorStore

        store = DescriptorStore()
        store.capture([descriptor_at(0.0)])
        verifier = FaceVerifier(store, tolerance=0.5)

        assert verifier.verify_all([make_face(0.1), make_face(0.9)]) == [True, False]

    def test_metrics(self):
        from proxyguard.proctor.detectors import FaceVerifier
        from proxyguard.proctor.reference_store import DescriptorStore

        store = DescriptorStore()
        store.capture([descriptor_at(0.0)])
        verifier = FaceVerifier(store)
        verifier.verify_all([make_face(0.1), make_face(0.2), make_face(0.3), make_face(0.9)])

        metrics = verifier.get_metrics()
        assert metrics["verification_count"] == 4
        assert metrics["verified_count"] == 3
        assert metrics["verification_rate"] == 0.75
        assert metrics["reference_faces"] == 1

        verifier.reset()
        assert verifier.get_metrics()["verification_count"] == 0


class TestDescriptorStore:
    """Tests for DescriptorStore"""

    def test_capture_without_faces_fails_and_leaves_store_empty(self):
        from proxyguard.proctor.errors import NoFaceFound
        from proxyguard.proctor.reference_store import DescriptorStore
        from proxyguard.proctor.types import SessionState

        state = SessionState(camera_on=True)
        store = DescriptorStore(state)

        with pytest.raises(NoFaceFound):
            store.capture([])

        assert len(store) == 0
        assert state.reference_captured is False

    def test_failed_capture_keeps_previous_reference(self):
        from proxyguard.proctor.errors import NoFaceFound
        from proxyguard.proctor.reference_store import DescriptorStore

        store = DescriptorStore()
        store.capture([descriptor_at(0.3)])

        with pytest.raises(NoFaceFound):
            store.capture([])

        assert len(store) == 1
        assert store.captured is True

    def test_capture_replaces_contents(self):
        from proxyguard.proctor.reference_store import DescriptorStore
        from proxyguard.proctor.types import SessionState

        state = SessionState(camera_on=True)
        store = DescriptorStore(state)
        store.capture([descriptor_at(9.0)])

        count = store.capture([descriptor_at(0.1), descriptor_at(0.2), descriptor_at(0.3)])

        assert count == 3
        assert [float(d[0]) for d in store.descriptors] == [0.1, 0.2, 0.3]
        assert state.reference_captured is True

    def test_descriptors_are_read_only(self):
        from proxyguard.proctor.reference_store import DescriptorStore

        source = np.zeros(128)
        store = DescriptorStore()
        store.capture([source])
        source[0] = 1.0

        stored = store.descriptors[0]
        assert stored[0] == 0.0
        with pytest.raises(ValueError):
            stored[0] = 2.0

    def test_clear(self):
        from proxyguard.proctor.reference_store import DescriptorStore
        from proxyguard.proctor.types import SessionState

        state = SessionState(camera_on=True)
        store = DescriptorStore(state)
        store.capture([descriptor_at(0.0)])

        store.clear()

        assert len(store) == 0
        assert not store
        assert state.reference_captured is False
