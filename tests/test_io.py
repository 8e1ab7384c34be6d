import json
import random
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path

import pandas as pd

from timetable_ai.config import GAConfig, load_config
from timetable_ai.data_loader import (
    filter_subjects, load_data, rooms_from_frame, subjects_from_frame, validate_subjects,
)
from timetable_ai.encoding import (
    build_timetable_document, schedule_from_dict, schedule_to_dict,
    schedule_to_frame, schedule_to_grid_frame,
)
from timetable_ai.grid import SlotGrid
from timetable_ai.initial_population import build_random_schedule
from timetable_ai.model import LUNCH_BREAK, InvalidInput, Room, Subject


class ConfigTests(unittest.TestCase):
    def test_defaults(self):
        cfg = GAConfig()
        self.assertEqual(cfg.population_size, 50)
        self.assertEqual(cfg.generations, 100)
        self.assertEqual(cfg.mutation_rate, 0.1)
        self.assertEqual(cfg.elitism_fraction, 0.2)
        self.assertEqual(cfg.elite_size, 10)
        self.assertEqual(cfg.grid().capacity, 42)

    def test_elite_size_is_at_least_one(self):
        self.assertEqual(GAConfig(population_size=3).elite_size, 1)
        self.assertEqual(GAConfig(population_size=4, elitism_fraction=1.0).elite_size, 4)

    def test_rejects_bad_values(self):
        bad = [
            {"population_size": 0},
            {"generations": -1},
            {"generations": "diez"},
            {"mutation_rate": 1.5},
            {"mutation_rate": "alta"},
            {"elitism_fraction": 0.0},
            {"elitism_fraction": 1.2},
            {"seed": 1.5},
        ]
        for kwargs in bad:
            with self.subTest(kwargs=kwargs):
                with self.assertRaises(InvalidInput):
                    GAConfig(**kwargs)

    def test_from_dict_ignores_unknown_keys(self):
        cfg = GAConfig.from_dict({"generations": 7, "unknown": 1})
        self.assertEqual(cfg.generations, 7)
        self.assertFalse(hasattr(cfg, "unknown"))

    def test_load_config_from_yaml(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.yaml"
            path.write_text("population_size: 12\nmutation_rate: 0.3\nunassigned_room: SIN AULA\n", encoding="utf-8")
            cfg = load_config(str(path))
            self.assertEqual(cfg.population_size, 12)
            self.assertEqual(cfg.mutation_rate, 0.3)
            self.assertEqual(cfg.unassigned_room, "SIN AULA")

            self.assertEqual(load_config(str(Path(tmp) / "missing.yaml")), GAConfig())

            path.write_text("- 1\n- 2\n", encoding="utf-8")
            with self.assertRaises(InvalidInput):
                load_config(str(path))

    def test_seeded_rng_is_private(self):
        cfg = GAConfig(seed=5)
        a, b = cfg.make_rng(), cfg.make_rng()
        self.assertEqual([a.random() for _ in range(3)], [b.random() for _ in range(3)])


class EncodingTests(unittest.TestCase):
    def setUp(self):
        self.grid = SlotGrid()
        self.subjects = [
            Subject("S1", "Cálculo", "Rojas", "theory", 3),
            Subject("S2", "Laboratorio", "Salas", "practical", 2),
        ]
        rooms = [Room("A101", "classroom"), Room("L1", "laboratory")]
        self.schedule = build_random_schedule(self.subjects, rooms, self.grid, random.Random(0))

    def test_dict_layout(self):
        doc = schedule_to_dict(self.schedule)
        self.assertEqual(list(doc), list(self.grid.days))
        for day in self.grid.days:
            self.assertEqual(list(doc[day]), list(self.grid.time_slots))
            self.assertEqual(doc[day]["12:00-13:00"], LUNCH_BREAK)
        cells = [c for day in doc.values() for c in day.values() if isinstance(c, dict)]
        self.assertEqual(len(cells), 5)
        self.assertEqual(set(cells[0]), {"subjectId", "subject", "instructor", "type", "room"})
        json.dumps(doc)

    def test_dict_roundtrip(self):
        doc = json.loads(json.dumps(schedule_to_dict(self.schedule)))
        self.assertEqual(schedule_from_dict(doc, self.grid), self.schedule)

    def test_timetable_document(self):
        stamp = datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc)
        doc = build_timetable_document(
            self.schedule, self.subjects, "Ingeniería 1A", 1, "Ingeniería", created_at=stamp
        )
        self.assertEqual(doc["courseName"], "Ingeniería 1A")
        self.assertEqual(doc["academicYear"], "2024")
        self.assertEqual(doc["subjects"], ["S1", "S2"])
        self.assertEqual(doc["createdAt"], stamp.isoformat())
        self.assertIn("Monday", doc["schedule"])

        doc = build_timetable_document(self.schedule, self.subjects, "X", 2, "Y", academic_year="2024-2025")
        self.assertEqual(doc["academicYear"], "2024-2025")

    def test_frames(self):
        rows = schedule_to_frame(self.schedule)
        self.assertEqual(len(rows), 5)
        self.assertEqual(set(rows.loc[rows["ID"] == "S2", "Aula"]), {"L1"})
        self.assertEqual(set(rows.loc[rows["ID"] == "S1", "Aula"]), {"A101"})

        grid_df = schedule_to_grid_frame(self.schedule)
        self.assertEqual(grid_df.shape, (8, 6))
        self.assertTrue((grid_df.loc["12:00-13:00"] == "ALMUERZO").all())


class DataLoaderTests(unittest.TestCase):
    def test_subjects_defaults_and_types(self):
        df = pd.DataFrame([
            {"id": "S1", "name": "Cálculo", "instructor": "Rojas", "hoursPerWeek": 4, "type": "theory"},
            {"id": "S2", "name": "Química", "instructor": "Núñez", "hoursPerWeek": None, "type": None},
            {"id": "S3", "name": "Taller", "instructor": "Vega", "hoursPerWeek": 2, "type": "Practical"},
        ])
        subjects = subjects_from_frame(df)
        self.assertEqual([s.hours_per_week for s in subjects], [4, 3, 2])
        self.assertEqual([s.type for s in subjects], ["theory", "theory", "practical"])
        self.assertTrue(all(isinstance(s.hours_per_week, int) for s in subjects))

    def test_subjects_reject_malformed_rows(self):
        base = {"id": "S1", "name": "Cálculo", "instructor": "Rojas", "hoursPerWeek": 3, "type": "theory"}
        bad = [
            {"hoursPerWeek": -1},
            {"hoursPerWeek": 2.5},
            {"hoursPerWeek": "tres"},
            {"instructor": ""},
            {"type": "seminar"},
        ]
        for change in bad:
            with self.subTest(change=change):
                with self.assertRaises(InvalidInput):
                    subjects_from_frame(pd.DataFrame([{**base, **change}]))

    def test_validate_subjects_direct(self):
        with self.assertRaises(InvalidInput):
            validate_subjects([Subject("S1", "X", "Y", "theory", -2)])
        validate_subjects([Subject("S1", "X", "Y", "tutorial", 0)])

    def test_subjects_reject_repeated_ids(self):
        df = pd.DataFrame([
            {"id": "S1", "name": "Cálculo", "instructor": "Rojas", "hoursPerWeek": 40, "type": "theory"},
            {"id": "S1", "name": "Física", "instructor": "Salas", "hoursPerWeek": 5, "type": "theory"},
        ])
        with self.assertRaises(InvalidInput):
            subjects_from_frame(df)

        # sin columna id se usa el código, que también debe ser único
        df = pd.DataFrame([
            {"code": "MAT1", "name": "Cálculo", "instructor": "Rojas", "hoursPerWeek": 3},
            {"code": "MAT1", "name": "Álgebra", "instructor": "Salas", "hoursPerWeek": 3},
        ])
        with self.assertRaises(InvalidInput):
            subjects_from_frame(df)

    def test_rooms_keep_only_active(self):
        df = pd.DataFrame([
            {"roomNumber": "A101", "type": "classroom", "capacity": 40, "isActive": True},
            {"roomNumber": "L1", "type": "laboratory", "capacity": 20, "isActive": False},
            {"roomNumber": 305, "type": "auditorium", "capacity": None, "isActive": None},
        ])
        rooms = rooms_from_frame(df)
        self.assertEqual([r.label for r in rooms], ["A101", "305"])
        self.assertEqual(rooms[0].capacity, 40)
        self.assertIsNone(rooms[1].capacity)
        self.assertEqual(len(rooms_from_frame(df, active_only=False)), 3)

    def test_rooms_reject_unknown_type(self):
        with self.assertRaises(InvalidInput):
            rooms_from_frame(pd.DataFrame([{"roomNumber": "X1", "type": "garage"}]))

    def test_filter_subjects(self):
        subjects = [
            Subject("S1", "A", "X", "theory", 3, department="CS", semester=1),
            Subject("S2", "B", "X", "theory", 3, department="CS", semester=2),
            Subject("S3", "C", "Y", "theory", 3, department="EE", semester=1),
        ]
        self.assertEqual([s.id for s in filter_subjects(subjects, department="CS")], ["S1", "S2"])
        self.assertEqual([s.id for s in filter_subjects(subjects, semester=1)], ["S1", "S3"])
        self.assertEqual([s.id for s in filter_subjects(subjects, "CS", 1)], ["S1"])

    def test_load_data_from_directory(self):
        with tempfile.TemporaryDirectory() as tmp:
            Path(tmp, "subjects.csv").write_text(
                "id,name,instructor,department,semester,hoursPerWeek,type\n"
                "S1,Cálculo,Rojas,CS,1,4,theory\n"
                "S2,Física,Salas,CS,2,,practical\n",
                encoding="utf-8",
            )
            Path(tmp, "rooms.json").write_text(
                json.dumps([{"roomNumber": "L1", "type": "laboratory", "capacity": 20, "isActive": True}]),
                encoding="utf-8",
            )
            bundle = load_data(tmp)
            self.assertEqual([s.hours_per_week for s in bundle.subjects], [4, 3])
            self.assertEqual([r.label for r in bundle.rooms], ["L1"])

            only_first = load_data(tmp, semester=1)
            self.assertEqual([s.id for s in only_first.subjects], ["S1"])

    def test_load_data_without_rooms(self):
        with tempfile.TemporaryDirectory() as tmp:
            Path(tmp, "subjects.csv").write_text(
                "id,name,instructor,hoursPerWeek,type\nS1,Cálculo,Rojas,2,theory\n", encoding="utf-8"
            )
            bundle = load_data(tmp)
            self.assertEqual(bundle.rooms, [])


if __name__ == "__main__":
    unittest.main()
