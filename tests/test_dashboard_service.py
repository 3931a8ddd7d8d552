import unittest

from gradetrack.config.settings import settings
from gradetrack.core.allocation import RejectReason
from gradetrack.core.scale import LETTER_PLUS_SCALE, STANDARD_SCALE, get_scale
from gradetrack.services.dashboard_service import (
    DashboardService,
    DashboardServiceError,
    RecomputeRequest,
)


class FakeStore:
    def __init__(self, courses, assignments):
        self.courses = courses
        self.assignments = assignments

    def list_courses(self, owner_id):
        return [c for c in self.courses if c.get("owner_id") == owner_id]

    def list_assignments(self, course_id):
        return [a for a in self.assignments if a["course_id"] == course_id]


class BrokenStore(FakeStore):
    def list_assignments(self, course_id):
        raise ConnectionError("store unavailable")


def _store():
    courses = [
        {"id": "c1", "name": "Calculus", "code": "MTH101", "credits": 4, "owner_id": "u1"},
        {"id": "c2", "name": "", "code": "HIS200", "credits": 3, "owner_id": "u1"},
        {"id": "c3", "name": "Physics", "code": None, "credits": 3, "owner_id": "u1"},
        {"id": "c4", "name": "Other", "credits": 2, "owner_id": "u2"},
    ]
    assignments = [
        {"id": "a1", "course_id": "c1", "name": "Quiz", "max_grade": 20, "grade": 18, "completed": True},
        {"id": "a2", "course_id": "c1", "name": "Project", "max_grade": 30, "grade": None, "completed": False},
        {"id": "a3", "course_id": "c1", "name": "Final", "max_grade": 50, "grade": 45, "completed": True},
        {"id": "a4", "course_id": "c2", "name": "Essay", "max_grade": 40, "grade": None, "due_date": "2026-11-02"},
        {"id": "a5", "course_id": "c4", "name": "Lab", "max_grade": 10, "grade": 10},
    ]
    return FakeStore(courses, assignments)


class RecomputeTests(unittest.TestCase):
    def test_snapshot(self):
        service = DashboardService(_store(), scale=STANDARD_SCALE)
        snapshot = service.recompute(RecomputeRequest("u1", revision=3))

        self.assertEqual(snapshot.revision, 3)
        self.assertEqual(snapshot.course_count, 3)
        self.assertEqual(snapshot.scale_name, "standard")
        self.assertEqual([s.course_id for s in snapshot.course_stats], ["c1", "c2", "c3"])

        calculus, history, physics = snapshot.course_stats
        self.assertAlmostEqual(calculus.percentage, 63.0, places=6)
        self.assertEqual(calculus.letter_grade, "D")
        self.assertEqual(history.label, "HIS200")
        self.assertEqual(history.percentage, 0.0)
        self.assertFalse(history.counted)
        self.assertFalse(physics.counted)

        # Only Calculus has earned points, so it alone sets the GPA.
        self.assertAlmostEqual(snapshot.overall_gpa, 1.0, places=6)
        self.assertEqual(snapshot.total_credits_counted, 4)

        self.assertEqual(len(snapshot.bar_series), 3)
        self.assertEqual(sum(s.count for s in snapshot.pie_segments), 2)
        self.assertAlmostEqual(sum(s.angle for s in snapshot.pie_segments), 360.0, delta=1e-6)
        self.assertIsNotNone(snapshot.computed_at)

    def test_no_courses(self):
        snapshot = DashboardService(_store()).recompute(RecomputeRequest("nobody"))
        self.assertEqual(snapshot.overall_gpa, 0.0)
        self.assertEqual(snapshot.course_stats, [])
        self.assertEqual(snapshot.bar_series, [])
        self.assertEqual(snapshot.pie_segments, [])

    def test_scale_drives_buckets(self):
        snapshot = DashboardService(_store(), scale=LETTER_PLUS_SCALE).recompute(RecomputeRequest("u1"))
        self.assertEqual(snapshot.course_stats[0].letter_grade, "C+")
        self.assertEqual([s.letter_grade for s in snapshot.pie_segments], ["C+", "F"])

    def test_assignment_without_max_grade_is_charted(self):
        store = FakeStore(
            [
                {"id": "c1", "name": "Art", "credits": 3, "owner_id": "u1"},
                {"id": "c2", "name": "Music", "credits": 3, "owner_id": "u1"},
            ],
            [
                {"id": "a1", "course_id": "c1", "max_grade": 100, "grade": 95},
                {"id": "a2", "course_id": "c2", "max_grade": None},
            ],
        )
        snapshot = DashboardService(store).recompute(RecomputeRequest("u1"))
        self.assertEqual(snapshot.course_stats[1].assignment_count, 1)
        self.assertEqual([(s.letter_grade, s.count) for s in snapshot.pie_segments], [("A", 1), ("F", 1)])
        self.assertAlmostEqual(sum(s.angle for s in snapshot.pie_segments), 360.0, delta=1e-6)

    def test_stale_snapshot(self):
        service = DashboardService(_store())
        first = RecomputeRequest("u1")
        snapshot = service.recompute(first)
        self.assertFalse(snapshot.is_stale(first))
        self.assertTrue(snapshot.is_stale(first.next()))
        self.assertTrue(snapshot.is_stale(RecomputeRequest("u2")))

    def test_from_settings(self):
        service = DashboardService.from_settings(_store())
        self.assertEqual(service.scale, get_scale(settings.grade_scale))
        self.assertEqual(service.chart_radius, settings.chart_radius)

    def test_store_failure_is_wrapped(self):
        base = _store()
        service = DashboardService(BrokenStore(base.courses, base.assignments))
        with self.assertRaises(DashboardServiceError) as ctx:
            service.recompute(RecomputeRequest("u1"))
        self.assertIsInstance(ctx.exception.__cause__, ConnectionError)


class ProposalTests(unittest.TestCase):
    def test_propose_assignment(self):
        service = DashboardService(_store())
        rejected = service.propose_assignment("c2", 61)
        self.assertFalse(rejected.accepted)
        self.assertEqual(rejected.reason, RejectReason.ALLOCATION_EXCEEDED)
        self.assertEqual(rejected.remaining_headroom, 60)
        self.assertTrue(service.propose_assignment("c2", 60).accepted)

        full = service.propose_assignment("c1", 1)
        self.assertFalse(full.accepted)
        self.assertEqual(full.remaining_headroom, 0)

    def test_propose_grade_entry(self):
        service = DashboardService(_store())
        self.assertFalse(service.propose_grade_entry("a3", 50, -1).accepted)
        self.assertFalse(service.propose_grade_entry("a3", 50, 51).accepted)
        cleared = service.propose_grade_entry("a3", 50, "")
        self.assertTrue(cleared.accepted)
        self.assertIsNone(cleared.value)

    def test_course_summary(self):
        summary = DashboardService(_store()).course_summary("c1")
        self.assertTrue(summary.fully_allocated)
        self.assertEqual(summary.remaining_allocation, 0)
        self.assertEqual(summary.assignment_count, 3)
        self.assertEqual(summary.completed_count, 2)
        self.assertAlmostEqual(summary.assignment_percentages["a1"], 90.0, places=6)
        self.assertIsNone(summary.assignment_percentages["a2"])


if __name__ == "__main__":
    unittest.main()
