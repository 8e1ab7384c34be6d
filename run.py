import argparse
import json
import time
from pathlib import Path

import pandas as pd

from timetable_ai.config import GAConfig, load_config
from timetable_ai.data_loader import load_data
from timetable_ai.encoding import build_timetable_document, schedule_to_frame, schedule_to_grid_frame
from timetable_ai.evaluation import EvaluationResult, evaluate, unplaced_hours
from timetable_ai.ga import GeneticSolver
from timetable_ai.grid import Schedule


def print_schedule(schedule: Schedule):
    grid_df = schedule_to_grid_frame(schedule)
    print("\n" + "=" * 80)
    print("HORARIO SEMANAL")
    print("=" * 80)
    with pd.option_context("display.max_columns", None, "display.width", 200, "display.max_colwidth", 30):
        print(grid_df)
    print("=" * 80 + "\n")


def export_outputs(schedule: Schedule, eval_res: EvaluationResult, document: dict, out_dir: Path):
    out_dir.mkdir(parents=True, exist_ok=True)
    schedule_to_frame(schedule).to_csv(out_dir / "schedule.csv", index=False)
    (out_dir / "timetable.json").write_text(json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8")
    conflicts = pd.DataFrame(
        [
            {"tipo": "conflictos_docente", "valor": eval_res.conflicts},
            {"tipo": "penalizacion_docente", "valor": eval_res.conflict_penalty},
            {"tipo": "varianza_carga", "valor": eval_res.load_variance},
            {"tipo": "fitness", "valor": eval_res.fitness},
        ]
    )
    conflicts.to_csv(out_dir / "conflicts.csv", index=False)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Generación de horario semanal con algoritmo genético")
    parser.add_argument("--config", default="config.yaml", help="Ruta al archivo de configuración")
    parser.add_argument("--data_dir", default="data", help="Directorio con subjects.csv y rooms.csv")
    parser.add_argument("--department", default=None, help="Filtra asignaturas por departamento")
    parser.add_argument("--semester", type=int, default=None, help="Filtra asignaturas por semestre")
    parser.add_argument("--course", default="Curso", help="Nombre del curso para el documento")
    parser.add_argument("--academic_year", default=None, help="Año académico (por defecto el actual)")
    parser.add_argument("--out_dir", default="outputs", help="Directorio de salida")
    args = parser.parse_args(argv)

    cfg: GAConfig = load_config(args.config)

    print("Cargando datos...")
    bundle = load_data(args.data_dir, cfg, department=args.department, semester=args.semester)
    print(f"Asignaturas: {len(bundle.subjects)} | Aulas activas: {len(bundle.rooms)}")

    solver = GeneticSolver(bundle.subjects, bundle.rooms, cfg)

    print(f"Generaciones: {cfg.generations} | Población: {cfg.population_size}")
    start = time.perf_counter()
    best = solver.evolve()
    elapsed = time.perf_counter() - start

    eval_res = evaluate(best.schedule, cfg)
    missing = unplaced_hours(best.schedule, bundle.subjects)

    print("\n--- MEJOR SOLUCIÓN ---")
    print(f"Fitness: {best.fitness:.3f} | Conflictos: {eval_res.conflicts} | Tiempo: {elapsed:.2f}s")
    print(f"Carga diaria: {eval_res.daily_loads.tolist()} (varianza {eval_res.load_variance:.3f})")
    if missing:
        print(f"Horas sin ubicar: {missing}")
    print_schedule(best.schedule)

    department = args.department or next((s.department for s in bundle.subjects if s.department), "")
    semester = args.semester if args.semester is not None else next(
        (s.semester for s in bundle.subjects if s.semester is not None), 1
    )
    document = build_timetable_document(
        best.schedule,
        bundle.subjects,
        course_name=args.course,
        semester=semester,
        department=department,
        academic_year=args.academic_year,
    )

    out_dir = Path(args.out_dir)
    export_outputs(best.schedule, eval_res, document, out_dir)
    if solver.history:
        pd.DataFrame(solver.history).to_csv(out_dir / "history.csv", index=False)
    metrics = {
        "best_fitness": best.fitness,
        "conflicts": eval_res.conflicts,
        "load_variance": eval_res.load_variance,
        "unplaced_hours": sum(missing.values()),
        "time_sec": elapsed,
        "generations_ran": len(solver.history),
    }
    pd.DataFrame([metrics]).to_csv(out_dir / "metrics.csv", index=False)
    print(f"Se guardaron resultados en {out_dir}/schedule.csv y {out_dir}/timetable.json")


if __name__ == "__main__":
    main()
