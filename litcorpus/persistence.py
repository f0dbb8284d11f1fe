"""
PersistenceManager: Saves analysis results to disk.

Tables go to CSV through Polars, sparse matrices to NPZ and figures to
PNG, each in its own subdirectory of the output directory.
"""

import json
from pathlib import Path
from typing import List, Sequence, Union

import polars as pl
from loguru import logger
from scipy.sparse import csr_matrix, load_npz, save_npz


class PersistenceManager:
    """
    Manages storage of analysis artifacts.

    Uses:
    - CSV for tabular data (Polars)
    - NPZ for sparse matrices, with a JSON sidecar for row/column labels
    - PNG for charts
    """

    def __init__(self, base_path: Union[str, Path]):
        """
        Initialize persistence manager.

        Args:
            base_path: Root directory for output
        """
        self.base_path = Path(base_path)

        self.tables_dir = self.base_path / "tables"
        self.matrices_dir = self.base_path / "matrices"
        self.figures_dir = self.base_path / "figures"

        for dir_path in [self.tables_dir, self.matrices_dir, self.figures_dir]:
            dir_path.mkdir(parents=True, exist_ok=True)

    def save_table(self, df: pl.DataFrame, filename: str) -> Path:
        """
        Save a table to CSV.

        Args:
            df: Polars DataFrame
            filename: Output filename

        Returns:
            Path of the written file
        """
        output_path = self.tables_dir / filename
        df.write_csv(output_path)
        logger.info(f"Saved {df.height} rows to {output_path}")
        return output_path

    def load_table(self, filename: str) -> pl.DataFrame:
        file_path = self.tables_dir / filename
        return pl.read_csv(file_path)

    def save_sparse_matrix(
        self,
        matrix: csr_matrix,
        filename: str,
        row_labels: Sequence[str],
        column_labels: Sequence[str]
    ) -> Path:
        """
        Save a sparse matrix in NPZ format with its labels.

        Args:
            matrix: Sparse matrix to save
            filename: Output filename (.npz)
            row_labels: Label of each row
            column_labels: Label of each column
        """
        output_path = self.matrices_dir / filename
        save_npz(output_path, matrix)

        labels_path = output_path.with_suffix('.json')
        with open(labels_path, 'w', encoding='utf-8') as f:
            json.dump({'rows': list(row_labels), 'columns': list(column_labels)}, f)

        logger.info(f"Saved sparse matrix {matrix.shape} to {output_path}")
        return output_path

    def load_sparse_matrix(self, filename: str):
        """
        Load a sparse matrix and its labels.

        Returns:
            Tuple of (matrix, row labels, column labels)
        """
        file_path = self.matrices_dir / filename
        matrix = load_npz(file_path)

        with open(file_path.with_suffix('.json'), 'r', encoding='utf-8') as f:
            labels = json.load(f)

        logger.info(f"Loaded sparse matrix {matrix.shape} from {file_path}")
        return matrix, labels['rows'], labels['columns']

    def save_figure(self, fig, filename: str, dpi: int = 150) -> Path:
        """Save a matplotlib Figure as PNG."""
        output_path = self.figures_dir / filename
        fig.savefig(output_path, dpi=dpi)
        logger.info(f"Saved figure to {output_path}")
        return output_path

    def list_outputs(self) -> List[Path]:
        return sorted(p for p in self.base_path.rglob('*') if p.is_file())
