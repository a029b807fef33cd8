# glass_nesting/solver_genetic.py
# Genetic algorithm (GA) for single-sheet nesting.
#
# An individual is one (x, y, rotation) gene per piece. Fitness is the share of
# sheet area covered by the pieces whose gene is VALID: inside the usable area
# and not closer than minimum_gap to any piece accepted before it. Invalid genes
# simply do not count, so the reported best layout is always a legal one.
#
# The initial population mixes three seeding strategies (random, greedy,
# bottom-left) so the search starts from different regions. Generations use
# elitism, tournament selection, single-point crossover and position mutation.
#
# Budget: max_generations, quality_target (early stop) and options.time_limit
# (checked between generations, never in the middle of one).

from __future__ import annotations

import random
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .config import PlacementOptions, usable_bounds
from .errors import InvalidInput
from .logger import Logger, get_logger
from .solver_bottomleft import FreeSpace, pack_in_order
from .solver_greedy import greedy_order
from .types import EPS, Piece, PlacementResult, Sheet, rects_conflict


@dataclass(frozen=True)
class GeneticParams:
    population_size: int = 50
    max_generations: int = 100
    mutation_rate: float = 0.1
    crossover_rate: float = 0.8
    elite_size: int = 5
    tournament_size: int = 3

    # Largest single jitter step of a mutated position (mm)
    jitter_mm: float = 50.0

    # None -> fresh entropy on every run
    seed: Optional[int] = None

    progress_every: int = 10

    def __post_init__(self):
        if self.population_size < 2:
            raise InvalidInput("population_size must be >= 2")
        if self.max_generations < 1:
            raise InvalidInput("max_generations must be >= 1")
        if not (0 <= self.elite_size < self.population_size):
            raise InvalidInput("elite_size must be in [0, population_size)")
        if self.tournament_size < 1:
            raise InvalidInput("tournament_size must be >= 1")
        for name in ("mutation_rate", "crossover_rate"):
            v = getattr(self, name)
            if not (0.0 <= v <= 1.0):
                raise InvalidInput(f"{name} must be within [0, 1]")


@dataclass(frozen=True)
class Gene:
    x: float
    y: float
    rotation: int = 0


@dataclass(frozen=True)
class Individual:
    genes: Tuple[Gene, ...]
    fitness: float = 0.0
    accepted: Tuple[bool, ...] = ()


class _Problem:
    """Pieces + bounds shared by all individuals of one run (read-only)."""

    def __init__(self, pieces: Sequence[Piece], sheet: Sheet, options: PlacementOptions, rng: random.Random):
        self.pieces = list(pieces)
        self.sheet = sheet
        self.options = options
        self.rng = rng
        self.x0, self.y0, self.x1, self.y1 = usable_bounds(sheet, options)
        self.gap = options.minimum_gap

    def dims(self, i: int, rotation: int) -> Tuple[float, float]:
        p = self.pieces[i]
        if rotation == 90:
            return p.height, p.width
        return p.width, p.height

    def clip(self, i: int, x: float, y: float, rotation: int) -> Gene:
        w, h = self.dims(i, rotation)
        x = min(max(x, self.x0), max(self.x0, self.x1 - w))
        y = min(max(y, self.y0), max(self.y0, self.y1 - h))
        return Gene(x, y, rotation)

    def random_gene(self, i: int) -> Gene:
        rot = 0
        if self.options.allow_rotation and self.rng.random() < 0.5:
            rot = 90
        w, h = self.dims(i, rot)
        span_x = self.x1 - w - self.x0
        span_y = self.y1 - h - self.y0
        x = self.x0 + self.rng.random() * span_x if span_x > 0 else self.x0
        y = self.y0 + self.rng.random() * span_y if span_y > 0 else self.y0
        return Gene(x, y, rot)

    def evaluate(self, genes: Tuple[Gene, ...]) -> Individual:
        accepted: List[bool] = []
        taken: List[Tuple[float, float, float, float]] = []
        used = 0.0
        for i, g in enumerate(genes):
            w, h = self.dims(i, g.rotation)
            ok = (
                g.x >= self.x0 - EPS
                and g.y >= self.y0 - EPS
                and g.x + w <= self.x1 + EPS
                and g.y + h <= self.y1 + EPS
            )
            if ok:
                fp = (g.x, g.y, w, h)
                ok = not any(rects_conflict(fp, t, self.gap) for t in taken)
                if ok:
                    taken.append(fp)
                    used += self.pieces[i].area
            accepted.append(ok)
        fitness = used / self.sheet.area * 100.0 if self.sheet.area > 0 else 0.0
        return Individual(genes=genes, fitness=fitness, accepted=tuple(accepted))

    # --- seeding ---

    def seed_random(self) -> Tuple[Gene, ...]:
        return tuple(self.random_gene(i) for i in range(len(self.pieces)))

    def seed_packed(self, order: List[int], first_fit: bool) -> Tuple[Gene, ...]:
        work = [p.fresh_copy() for p in self.pieces]
        pack_in_order([work[i] for i in order], self.sheet, self.options, first_fit=first_fit)
        packed = [p.footprint() for p in work if p.placed]

        genes: List[Gene] = []
        last_packed: Optional[Gene] = None
        for i, p in enumerate(work):
            if p.placed:
                genes.append(Gene(p.x, p.y, p.rotation))
                last_packed = genes[-1]
            else:
                genes.append(self._filler_gene(i, packed, last_packed))
        return tuple(genes)

    def _filler_gene(self, i: int, packed: List[Tuple[float, float, float, float]], blocker: Optional[Gene]) -> Gene:
        """
        Gene for a piece the packing left out. It must never push out a packed
        piece evaluated after it, so it is either clear of the whole packed
        layout or parked on an earlier packed piece (and rejected there).
        """
        for _ in range(5):
            g = self.random_gene(i)
            w, h = self.dims(i, g.rotation)
            if g.x + w > self.x1 + EPS or g.y + h > self.y1 + EPS:
                continue
            if not any(rects_conflict((g.x, g.y, w, h), t, self.gap) for t in packed):
                return g
        if blocker is not None:
            return Gene(blocker.x, blocker.y, 0)
        # nothing packed ahead of it in evaluation order
        return self.random_gene(i)

    def noisy_order(self, key_order: List[int]) -> List[int]:
        """Area-based order with a little noise so seeds differ."""
        area = {i: self.pieces[i].area for i in key_order}
        return sorted(key_order, key=lambda i: -area[i] * (1.0 + self.rng.uniform(-0.3, 0.3)))

    # --- operators ---

    def crossover(self, a: Tuple[Gene, ...], b: Tuple[Gene, ...]) -> Tuple[Tuple[Gene, ...], Tuple[Gene, ...]]:
        n = len(a)
        if n < 2:
            return a, b
        k = self.rng.randint(1, n - 1)
        return a[:k] + b[k:], b[:k] + a[k:]

    def mutate(self, genes: Tuple[Gene, ...], jitter: float) -> Tuple[Gene, ...]:
        out = list(genes)
        n = len(out)
        if n == 0:
            return genes
        for i in self.rng.sample(range(n), self.rng.randint(1, min(3, n))):
            g = out[i]
            r = self.rng.random()
            if r < 0.5:
                out[i] = self.clip(i, g.x + self.rng.uniform(-jitter, jitter), g.y + self.rng.uniform(-jitter, jitter), g.rotation)
            elif r < 0.8 or not self.options.allow_rotation:
                out[i] = self.random_gene(i)
            else:
                out[i] = self.clip(i, g.x, g.y, 0 if g.rotation == 90 else 90)
        return tuple(out)

    def tournament(self, population: List[Individual], size: int) -> Individual:
        best = population[self.rng.randrange(len(population))]
        for _ in range(size - 1):
            cand = population[self.rng.randrange(len(population))]
            if cand.fitness > best.fitness:
                best = cand
        return best


def _initial_population(problem: _Problem, size: int) -> List[Individual]:
    n = len(problem.pieces)
    area_order = list(range(n))  # pieces are pre-sorted by area desc
    pieces_greedy = greedy_order(problem.pieces)
    index_of = {id(p): i for i, p in enumerate(problem.pieces)}
    canonical_greedy = [index_of[id(p)] for p in pieces_greedy]

    population: List[Individual] = []
    for k in range(size):
        kind = k % 3
        if kind == 0:
            genes = problem.seed_random()
        elif kind == 1:
            order = canonical_greedy if k == 1 else problem.noisy_order(area_order)
            genes = problem.seed_packed(order, first_fit=True)
        else:
            order = area_order if k == 2 else problem.noisy_order(area_order)
            genes = problem.seed_packed(order, first_fit=False)
        population.append(problem.evaluate(genes))
    return population


def solve_genetic(
    pieces: Sequence[Piece],
    sheet: Sheet,
    options: PlacementOptions,
    params: Optional[GeneticParams] = None,
    logger: Optional[Logger] = None,
) -> PlacementResult:
    """
    Evolve piece positions toward higher utilization.
    Returns the best individual seen across all generations.
    """
    params = params or GeneticParams()
    log = logger or get_logger()
    rng = random.Random(params.seed)

    work = sorted((p.fresh_copy() for p in pieces), key=lambda p: -p.area)
    if not work:
        return PlacementResult(placed=(), unplaced=(), leftover=FreeSpace.for_sheet(sheet, options).snapshot(),
                               meta={"strategy": "genetic", "generations": 0, "best_fitness": 0.0})

    problem = _Problem(work, sheet, options, rng)
    target = options.quality_target * 100.0
    t0 = time.perf_counter()

    population = _initial_population(problem, params.population_size)
    best = max(population, key=lambda ind: ind.fitness)
    stop_reason = "max_generations"
    generation = 0

    for generation in range(1, params.max_generations + 1):
        population.sort(key=lambda ind: ind.fitness, reverse=True)
        if population[0].fitness > best.fitness:
            best = population[0]

        if generation % params.progress_every == 0:
            log.debug("genetic progress", generation=generation, best_fitness=best.fitness)

        if best.fitness >= target:
            stop_reason = "quality_target"
            break
        if generation == params.max_generations:
            break
        if time.perf_counter() - t0 >= options.time_limit:
            stop_reason = "time_limit"
            break

        next_pop: List[Individual] = population[: params.elite_size]
        while len(next_pop) < params.population_size:
            p1 = problem.tournament(population, params.tournament_size)
            p2 = problem.tournament(population, params.tournament_size)

            if rng.random() < params.crossover_rate:
                g1, g2 = problem.crossover(p1.genes, p2.genes)
            else:
                g1, g2 = p1.genes, p2.genes

            if rng.random() < params.mutation_rate:
                g1 = problem.mutate(g1, params.jitter_mm)
            if rng.random() < params.mutation_rate:
                g2 = problem.mutate(g2, params.jitter_mm)

            next_pop.append(problem.evaluate(g1))
            if len(next_pop) < params.population_size:
                next_pop.append(problem.evaluate(g2))

        population = next_pop

    placed: List[Piece] = []
    unplaced: List[Piece] = []
    space = FreeSpace.for_sheet(sheet, options)
    for piece, gene, ok in zip(work, best.genes, best.accepted):
        if ok:
            piece.place(gene.x, gene.y, gene.rotation)
            placed.append(piece)
            space.occupy(gene.x, gene.y, piece.placed_width, piece.placed_height, options.minimum_gap)
        else:
            unplaced.append(piece)

    return PlacementResult(
        placed=tuple(placed),
        unplaced=tuple(unplaced),
        leftover=space.snapshot(),
        meta={
            "strategy": "genetic",
            "generations": generation,
            "best_fitness": best.fitness,
            "stop_reason": stop_reason,
            "elapsed_s": time.perf_counter() - t0,
        },
    )
