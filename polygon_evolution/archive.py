"""
polygon_evolution/archive.py - Evolution archive and persistence
"""
import os
import json
import time
from typing import Dict, Any, List, Optional
from datetime import datetime

from .chromosome import PolygonChromosome
from .population import Population

LOG_FILENAME = os.path.join('logs', 'evolution_log.json')

class EvolutionArchive:
    """Archive evolution runs: best chromosomes, logs and per-generation stats"""

    def __init__(self, base_path: str):
        self.base_path = base_path
        self.evolution_log = []

        self.dirs = {
            'genomes': os.path.join(base_path, 'genomes'),
            'logs': os.path.join(base_path, 'logs'),
            'renders': os.path.join(base_path, 'renders'),
            'stats': os.path.join(base_path, 'stats')
        }

        for dir_path in self.dirs.values():
            os.makedirs(dir_path, exist_ok=True)

    @staticmethod
    def has_log(base_path: str) -> bool:
        """True if ``base_path`` holds the log of a previous run"""
        return os.path.isfile(os.path.join(base_path, LOG_FILENAME))

    @property
    def log_file(self) -> str:
        return os.path.join(self.base_path, LOG_FILENAME)

    def load_log(self) -> List[Dict[str, Any]]:
        """Load the evolution log of a previous run, if any"""
        if os.path.exists(self.log_file):
            with open(self.log_file, 'r') as f:
                self.evolution_log = json.load(f)
        return self.evolution_log

    def archive_generation(self, population: Population, generation: int,
                           stats: Dict[str, Any], keep: int = 5) -> List[str]:
        """Save the generation's best chromosomes and log its statistics"""
        timestamp = time.time()

        genome_files = []
        for i, chromosome in enumerate(population.get_best(keep)):
            filename = f"gen_{generation:04d}_rank_{i+1:02d}.json"
            chromosome.to_json(os.path.join(self.dirs['genomes'], filename))
            genome_files.append(filename)

        generation_data = {
            'generation': generation,
            'timestamp': timestamp,
            'datetime': datetime.fromtimestamp(timestamp).isoformat(),
            'config': population.config.to_dict(),
            'stats': stats,
            'best_genomes': genome_files,
            'population_diversity': population.diversity_stats()
        }
        self.evolution_log.append(generation_data)

        with open(self.log_file, 'w') as f:
            json.dump(self.evolution_log, f, indent=2)

        stats_file = os.path.join(self.dirs['stats'], f'gen_{generation:04d}_stats.json')
        with open(stats_file, 'w') as f:
            json.dump(generation_data, f, indent=2)

        return genome_files

    def export_summary_report(self) -> str:
        """Generate and save a summary report of the evolution run"""
        if not self.evolution_log:
            return "No evolution data to summarize"

        first, last = self.evolution_log[0], self.evolution_log[-1]
        config = first.get('config', {})
        duration = last['timestamp'] - first['timestamp']

        lines = [
            "EVOLUTION SUMMARY REPORT",
            f"Run: {first['datetime']} .. {last['datetime']} ({duration:.1f}s)",
            f"Population {config.get('population_size', '?')}, "
            f"{config.get('polygon_count', '?')} polygons x {config.get('vertex_count', '?')} vertices, "
            f"mutation {config.get('mutation_rate', '?')} / {config.get('mutation_amount', '?')}",
            f"Best ever fitness: {last['stats'].get('best_ever', 0):.6f}",
            "",
            "Generation      best       mean  diversity",
        ]
        for gen_data in self.evolution_log:
            fitness = gen_data['stats'].get('fitness', {})
            diversity = gen_data.get('population_diversity', {}).get('genome_diversity', 0)
            lines.append(f"{gen_data['generation']:10d}  {fitness.get('max', 0):.6f}  "
                         f"{fitness.get('mean', 0):.6f}  {diversity:9.3f}")

        best_files = last.get('best_genomes', [])
        if best_files:
            lines.append("")
            lines.append(f"Final best genome: {best_files[0]}")

        report_text = "\n".join(lines)
        with open(os.path.join(self.base_path, 'evolution_summary.txt'), 'w') as f:
            f.write(report_text)
        return report_text

    def get_archive_stats(self) -> Dict[str, Any]:
        """Count archived files per directory and their total size"""
        stats: Dict[str, Any] = {}
        total_size = 0
        for name, dir_path in self.dirs.items():
            files = [os.path.join(dir_path, f) for f in os.listdir(dir_path)]
            stats[f'{name}_files'] = len(files)
            total_size += sum(os.path.getsize(f) for f in files if os.path.isfile(f))
        stats['disk_files'] = sum(stats.values())
        stats['archive_size_mb'] = total_size / (1024 * 1024)
        return stats

    def list_archived_genomes(self) -> List[str]:
        """List all archived chromosome files"""
        genomes_dir = self.dirs['genomes']
        return sorted(os.path.join(genomes_dir, f) for f in os.listdir(genomes_dir)
                      if f.endswith('.json'))

    def load_chromosome(self, filename: str) -> Optional[PolygonChromosome]:
        """Load an archived chromosome, or None if the file does not exist"""
        if not os.path.isabs(filename):
            filename = os.path.join(self.dirs['genomes'], filename)
        if not os.path.exists(filename):
            return None
        return PolygonChromosome.from_json(filename=filename)
