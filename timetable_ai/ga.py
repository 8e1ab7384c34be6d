import random
from typing import Callable, Dict, List, Optional, Sequence

from .config import GAConfig
from .evaluation import fitness
from .grid import Schedule, SlotGrid
from .initial_population import build_initial_population, build_random_schedule
from .model import Individual, Room, Subject
from .operators import mutate_swap, select_parent, uniform_crossover


class GeneticSolver:
    def __init__(
        self,
        subjects: Sequence[Subject],
        rooms: Sequence[Room],
        cfg: Optional[GAConfig] = None,
        grid: Optional[SlotGrid] = None,
        rng: Optional[random.Random] = None,
    ):
        self.subjects = list(subjects)
        self.rooms = list(rooms)
        self.cfg = cfg or GAConfig()
        self.grid = grid or self.cfg.grid()
        self.rng = rng or self.cfg.make_rng()
        self.history: List[Dict] = []

    def demand(self) -> int:
        return sum(s.hours_per_week for s in self.subjects)

    def initial_population(self) -> List[Schedule]:
        demand = self.demand()
        if demand > self.grid.capacity:
            print(
                f"Aviso: se piden {demand} horas y la rejilla solo tiene {self.grid.capacity}; "
                "las últimas asignaturas quedarán incompletas"
            )
        return build_initial_population(
            self.subjects, self.rooms, self.grid, self.cfg.population_size, self.rng, self.cfg
        )

    def rank(self, population: Sequence[Schedule]) -> List[Individual]:
        scored = [Individual(schedule=s, fitness=fitness(s, self.cfg)) for s in population]
        # sort es estable: los empates conservan el orden de la población
        scored.sort(key=lambda ind: ind.fitness, reverse=True)
        return scored

    def next_generation(self, ranked: Sequence[Individual]) -> List[Schedule]:
        # Elitismo
        new_pop = [ind.schedule for ind in ranked[: self.cfg.elite_size]]

        while len(new_pop) < self.cfg.population_size:
            p1 = select_parent(ranked, self.rng)
            p2 = select_parent(ranked, self.rng)
            child = uniform_crossover(p1, p2, self.rng)
            mutate_swap(child, self.rng, self.cfg.mutation_rate)
            new_pop.append(child)
        return new_pop

    def evolve(
        self,
        population: Optional[List[Schedule]] = None,
        generations: Optional[int] = None,
        should_stop: Optional[Callable[[int], bool]] = None,
    ) -> Individual:
        """
        Ejecuta el bucle generacional completo y devuelve el mejor individuo.

        ``should_stop(gen)`` se consulta una vez al inicio de cada generación;
        si devuelve True se corta la ejecución con la población actual.
        """
        if population is None:
            population = self.initial_population()
        if generations is None:
            generations = self.cfg.generations

        for gen in range(generations):
            if not population:
                break
            if should_stop is not None and should_stop(gen):
                print(f"Ejecución detenida en la generación {gen}")
                break

            ranked = self.rank(population)
            best_fit = ranked[0].fitness
            avg_fit = sum(ind.fitness for ind in ranked) / len(ranked)
            self.history.append({"gen": gen, "best_fitness": best_fit, "avg_fitness": avg_fit})

            log_every = self.cfg.log_every
            if log_every and (gen % log_every == 0 or gen == generations - 1):
                print(f"Gen {gen}: Mejor fitness={best_fit:.2f} Prom={avg_fit:.2f}")

            population = self.next_generation(ranked)

        if not population:
            best = self.fallback_schedule()
        else:
            best = population[0]
        return Individual(schedule=best, fitness=fitness(best, self.cfg))

    def fallback_schedule(self) -> Schedule:
        return build_random_schedule(self.subjects, self.rooms, self.grid, self.rng, self.cfg)


def generate_timetable(
    subjects: Sequence[Subject],
    rooms: Sequence[Room],
    cfg: Optional[GAConfig] = None,
    rng: Optional[random.Random] = None,
) -> Schedule:
    solver = GeneticSolver(subjects, rooms, cfg, rng=rng)
    return solver.evolve().schedule
