from sporefit.errors import SporefitError

import pandas as pd

import os

OK = "ok"
FAILED = "failed"
SKIPPED = "skipped"


class AnalysisReport:
    """
    Ordered record of the analysis blocks run for one experiment.

    Each block ends up either 'ok' with one or more result tables,
    'failed' with the data-integrity error that stopped it, or 'skipped'
    because a block it depends on failed. A failed block never leaves
    partial tables behind.

    Parameters
    ----------
    experiment : str
        experiment name used in summaries and file names.
    verbose : bool, default False
        print one line per block as it finishes.
    """

    def __init__(self, experiment, verbose=False):

        self.experiment = experiment
        self.verbose = verbose
        self._blocks = {}

    def _record(self, name, status, tables=None, error=None, notes=None):

        if name in self._blocks:
            raise ValueError(f"block '{name}' already recorded for {self.experiment}")

        self._blocks[name] = {"status": status,
                              "tables": tables if tables is not None else {},
                              "error": error,
                              "notes": list(notes) if notes is not None else []}

        if self.verbose:
            msg = f"[{self.experiment}] {name}: {status}"
            if error is not None:
                msg += f" ({error})"
            print(msg)

    def run_block(self, name, fcn, *args, requires=None, notes=None, **kwargs):
        """
        Run `fcn(*args, **kwargs)` as block `name`.

        `fcn` returns a DataFrame (stored as table 'result') or a dict of
        DataFrames. A `SporefitError` marks the block failed; any other
        exception propagates. If a block listed in `requires` is not 'ok',
        `fcn` is not called and the block is marked skipped.

        Returns
        -------
        object
            whatever `fcn` returned, or None if the block did not succeed.
        """

        if requires is not None:
            not_ok = [r for r in requires if self.status(r) != OK]
            if len(not_ok) > 0:
                self._record(name, SKIPPED,
                             error=f"requires block(s) that did not succeed: {not_ok}",
                             notes=notes)
                return None

        try:
            result = fcn(*args, **kwargs)
        except SporefitError as e:
            self._record(name, FAILED, error=f"{type(e).__name__}: {e}", notes=notes)
            return None

        if isinstance(result, pd.DataFrame):
            tables = {"result": result}
        else:
            tables = dict(result)

        self._record(name, OK, tables=tables, notes=notes)

        return result

    @property
    def block_names(self):
        return list(self._blocks)

    def status(self, name):
        """Status of a block, or None if it was never recorded."""
        if name not in self._blocks:
            return None
        return self._blocks[name]["status"]

    def error(self, name):
        return self._blocks[name]["error"]

    def notes(self, name):
        return list(self._blocks[name]["notes"])

    def get(self, name, table="result"):
        """Result table of a block; None if the block did not succeed."""

        if self.status(name) != OK:
            return None
        return self._blocks[name]["tables"][table]

    def tables(self, name):
        """All tables of a block as a dict (empty unless the block is 'ok')."""
        if self.status(name) != OK:
            return {}
        return dict(self._blocks[name]["tables"])

    def summary(self):
        """
        One row per block: experiment, block, status, tables, n_rows,
        error, notes.
        """

        rows = []
        for name, block in self._blocks.items():
            rows.append({"experiment": self.experiment,
                         "block": name,
                         "status": block["status"],
                         "tables": ",".join(block["tables"]),
                         "n_rows": sum(len(t) for t in block["tables"].values()),
                         "error": "" if block["error"] is None else block["error"],
                         "notes": " | ".join(block["notes"])})

        return pd.DataFrame(rows, columns=["experiment", "block", "status",
                                           "tables", "n_rows", "error", "notes"])

    def table_files(self, output_dir, prefix=""):
        """Map (block, table) to the csv path `write` uses."""

        files = {}
        for name, block in self._blocks.items():
            for table in block["tables"]:
                fname = f"{prefix}{self.experiment}_{name}_{table}.csv"
                files[(name, table)] = os.path.join(output_dir, fname)

        return files

    def write(self, output_dir, prefix=""):
        """
        Write every table and the block summary as csv files.

        Refuses to overwrite existing files.

        Returns
        -------
        list of str
            paths written, summary last.
        """

        files = self.table_files(output_dir, prefix)
        summary_file = os.path.join(output_dir, f"{prefix}{self.experiment}_summary.csv")

        prepare_output_dir(output_dir, list(files.values()) + [summary_file])

        written = []
        for (name, table), path in files.items():
            self._blocks[name]["tables"][table].to_csv(path, index=False)
            written.append(path)

        self.summary().to_csv(summary_file, index=False)
        written.append(summary_file)

        return written


def prepare_output_dir(output_dir, files):
    """
    Create `output_dir` if needed and make sure none of `files` exist.
    """

    if os.path.exists(output_dir):
        if not os.path.isdir(output_dir):
            err = f"output_dir '{output_dir}' exists and is not a directory\n"
            raise FileExistsError(err)
    else:
        os.makedirs(output_dir)

    found_files = [f for f in files if os.path.exists(f)]
    if len(found_files) > 0:
        err = f"output files already exist: {','.join(found_files)}\n"
        raise FileExistsError(err)
