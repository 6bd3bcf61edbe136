import unittest

from dayroute.locations import DEFAULT_LOCATIONS, LocationTable
from dayroute.models import Client, Coordinate, Job
from dayroute.optimisation import nearest_neighbor, nearest_unvisited, optimise_route
from dayroute.routing import estimate_drive_minutes, haversine_distance, round_km


def suburb_job(job_id, suburb, client_id=None):
    return Job(id=job_id, client_id=client_id, suburb=suburb, client_name=f"Client {job_id}")


class TestNearestNeighbor(unittest.TestCase):
    def test_picks_closest_unvisited(self):
        points = [Coordinate(0, 0), Coordinate(0, 3), Coordinate(0, 1), Coordinate(0, 2)]
        order = nearest_neighbor(points)
        self.assertEqual([idx for idx, _ in order], [0, 2, 3, 1])
        self.assertIsNone(order[0][1])
        self.assertTrue(all(km > 0 for _, km in order[1:]))

    def test_start_position_is_not_a_stop(self):
        points = [Coordinate(0, 3), Coordinate(0, 1)]
        order = nearest_neighbor(points, start=Coordinate(0, 0))
        self.assertEqual([idx for idx, _ in order], [1, 0])
        self.assertAlmostEqual(order[0][1], haversine_distance(Coordinate(0, 0), Coordinate(0, 1)))

    def test_empty(self):
        self.assertEqual(nearest_neighbor([]), [])

    def test_ties_go_to_lowest_index(self):
        points = [Coordinate(0, 1), Coordinate(0, -1), Coordinate(1, 0), Coordinate(-1, 0)]
        idx, _ = nearest_unvisited(Coordinate(0, 0), points, [False] * 4)
        self.assertEqual(idx, 0)
        idx, _ = nearest_unvisited(Coordinate(0, 0), points, [True, False, False, False])
        self.assertEqual(idx, 1)

    def test_nearest_unvisited_requires_candidates(self):
        with self.assertRaises(ValueError):
            nearest_unvisited(Coordinate(0, 0), [Coordinate(1, 1)], [True])


class TestOptimiseRoute(unittest.TestCase):
    def test_sunshine_coast_three_stops(self):
        jobs = [
            suburb_job("a", "Noosa Heads"),
            suburb_job("b", "Caloundra"),
            suburb_job("c", "Mooloolaba"),
        ]
        route = optimise_route(jobs, [])

        noosa = DEFAULT_LOCATIONS.lookup("Noosa Heads")
        mooloolaba = DEFAULT_LOCATIONS.lookup("Mooloolaba")
        caloundra = DEFAULT_LOCATIONS.lookup("Caloundra")
        self.assertLess(haversine_distance(noosa, mooloolaba), haversine_distance(noosa, caloundra))

        self.assertEqual([job.id for job in route], ["a", "c", "b"])
        self.assertIsNone(route[0].travel_km)
        self.assertIsNone(route[0].travel_mins)
        first_leg = haversine_distance(noosa, mooloolaba)
        second_leg = haversine_distance(mooloolaba, caloundra)
        self.assertEqual(route[1].travel_km, round_km(first_leg))
        self.assertEqual(route[1].travel_mins, estimate_drive_minutes(first_leg))
        self.assertEqual(route[2].travel_km, round_km(second_leg))
        self.assertEqual(route[2].travel_mins, estimate_drive_minutes(second_leg))
        self.assertAlmostEqual(route[1].travel_km, 32.4, delta=0.5)
        self.assertIsInstance(route[1].travel_mins, int)

    def test_accepts_raw_records(self):
        jobs = [
            {"id": "a", "suburb": "Noosa Heads", "client_name": "Smith"},
            {"id": "b", "suburb": "Caloundra", "clientName": "Jones"},
            {"id": "c", "clientId": "c1", "startTime": "09:00"},
            {"id": "d", "client_id": "c2", "suburb": "Gympie"},
        ]
        clients = [
            {"id": "c1", "lat": "-26.40", "lng": "153.09"},
            {"id": "c2", "latitude": "", "longitude": None},
        ]
        route = optimise_route(jobs, clients)
        self.assertTrue(all(isinstance(job, Job) for job in route))
        self.assertEqual([job.id for job in route], ["a", "c", "b", "d"])
        self.assertEqual(route[1].start_time, "09:00")
        self.assertLess(route[1].travel_km, 1.0)
        self.assertEqual(route[2].client_name, "Jones")
        self.assertIsNone(route[3].travel_km)

    def test_input_jobs_are_not_modified(self):
        jobs = [suburb_job("a", "Noosa Heads"), suburb_job("b", "Caloundra")]
        optimise_route(jobs, [])
        self.assertIsNone(jobs[1].travel_km)

    def test_client_coordinates_override_suburb(self):
        # client c2 actually lives next to Noosa Heads despite the job's suburb
        clients = [Client(id="c2", lat="-26.40", lng="153.09")]
        jobs = [
            suburb_job("a", "Noosa Heads"),
            suburb_job("b", "Mooloolaba"),
            suburb_job("c", "Caloundra", client_id="c2"),
        ]
        route = optimise_route(jobs, clients)
        self.assertEqual([job.id for job in route], ["a", "c", "b"])
        self.assertLess(route[1].travel_km, 1.0)

    def test_unresolved_jobs_go_last_in_input_order(self):
        jobs = [
            suburb_job("x", "Brisbane"),
            suburb_job("a", "Caloundra"),
            suburb_job("y", None),
            suburb_job("b", "Noosa Heads"),
            suburb_job("c", "Buderim"),
            suburb_job("z", "Gympie"),
        ]
        route = optimise_route(jobs, [])
        self.assertEqual([job.id for job in route][-3:], ["x", "y", "z"])
        for job in route[-3:]:
            self.assertIsNone(job.travel_km)
            self.assertIsNone(job.travel_mins)
        self.assertEqual(route[0].id, "a")

    def test_zero_or_one_job_is_unchanged(self):
        self.assertEqual(optimise_route([], []), [])
        single = [suburb_job("a", "Buderim")]
        self.assertEqual(optimise_route(single, []), single)
        self.assertEqual(optimise_route(single, [], start=Coordinate(-26.5, 153.0)), single)

    def test_single_resolvable_job_is_not_annotated(self):
        jobs = [suburb_job("x", "Nowhere"), suburb_job("a", "Buderim"), suburb_job("y", "Elsewhere")]
        route = optimise_route(jobs, [], start=Coordinate(-26.5, 153.0))
        self.assertEqual([job.id for job in route], ["a", "x", "y"])
        self.assertTrue(all(job.travel_km is None for job in route))

    def test_start_coordinate_annotates_every_resolved_job(self):
        depot = Coordinate(-26.80, 153.13)
        jobs = [suburb_job("a", "Noosa Heads"), suburb_job("b", "Mooloolaba"), suburb_job("c", "Caloundra")]
        route = optimise_route(jobs, [], start=depot)
        self.assertEqual([job.id for job in route], ["c", "b", "a"])
        self.assertTrue(all(job.travel_km is not None for job in route))
        self.assertEqual(route[0].travel_km, round_km(haversine_distance(depot, DEFAULT_LOCATIONS.lookup("Caloundra"))))

    def test_equidistant_jobs_keep_input_order(self):
        table = LocationTable.from_pairs({
            "Centre": (0.0, 0.0),
            "East": (0.0, 1.0),
            "West": (0.0, -1.0),
        })
        jobs = [suburb_job("c", "Centre"), suburb_job("w", "West"), suburb_job("e", "East")]
        route = optimise_route(jobs, [], locations=table)
        self.assertEqual([job.id for job in route], ["c", "w", "e"])

    def test_duplicate_locations(self):
        jobs = [suburb_job("a", "Buderim"), suburb_job("b", "Buderim"), suburb_job("c", "Buderim")]
        route = optimise_route(jobs, [])
        self.assertEqual([job.id for job in route], ["a", "b", "c"])
        self.assertEqual([job.travel_km for job in route[1:]], [0.0, 0.0])
        self.assertEqual([job.travel_mins for job in route[1:]], [0, 0])


if __name__ == "__main__":
    unittest.main()
