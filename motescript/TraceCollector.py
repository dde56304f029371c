"""
TraceCollector: CSV trace and summary output for MOTE-SCRIPT runs

This module records three streams per run:
1. Script log lines written through the TestLog sink
2. Reception-loss bookkeeping, one row per "received" line
3. Link mutations applied to the radio medium

All streams are exported as CSV files keyed by run id, and a JSON summary
with loss statistics is written when the run ends.

Copyright (c) 2025 MOTE-SCRIPT Research Team
Licensed under the MIT License
"""

import csv
import json
from pathlib import Path
import time as time_module
import numpy as np


class TraceCollector:
    """
    Manages per-run CSV traces.

    Rows are kept in memory for the summary and appended to disk as they
    arrive, so a run that aborts still leaves a usable partial trace.
    """
    def __init__(self):
        self.log_data = []
        self.reception_data = []
        self.link_event_data = []

        self.run_id = None
        self.output_dir = None
        self.start_time = None
        self._headers = {}
        self.log_file = None
        self.reception_file = None
        self.link_file = None

        self.sim_time_end_ms = 0
        self.wall_clock_seconds = 0.0
        self.verdict = None

    def init_trace_files(self, run_id, output_dir="traces"):
        """
        Initialize CSV files with headers for a new run.

        Args:
            run_id: Unique identifier for this run
            output_dir: Directory path for trace output

        Creates three CSV files:
        - script_log_{run_id}.csv: Lines written to the script log
        - reception_{run_id}.csv: Counter / loss bookkeeping
        - link_events_{run_id}.csv: Link deteriorate / improve calls
        """
        self.run_id = run_id
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

        log_headers = ['timestamp_ms', 'mote_id', 'text']
        self.log_file = self._create(f"script_log_{run_id}.csv", log_headers)

        reception_headers = ['timestamp_ms', 'counter', 'lost_counters', 'last_counter', 'gap']
        self.reception_file = self._create(f"reception_{run_id}.csv", reception_headers)

        link_headers = ['timestamp_ms', 'action', 'mote_a', 'mote_b']
        self.link_file = self._create(f"link_events_{run_id}.csv", link_headers)

        self.start_time = time_module.time()

    def _create(self, name, headers):
        path = self.output_dir / name
        with open(path, 'w', newline='') as f:
            csv.writer(f).writerow(headers)
        self._headers[str(path)] = headers
        return path

    def record_log_line(self, timestamp, mote_id, text):
        row = {
            'timestamp_ms': timestamp,
            'mote_id': mote_id,
            'text': text.rstrip("\n"),
        }
        self.log_data.append(row)
        self._append_to_csv(self.log_file, row)

    def record_reception(self, timestamp, counter, lost_counters, last_counter, gap):
        """Record one processed "received" line."""
        row = {
            'timestamp_ms': timestamp,
            'counter': counter,
            'lost_counters': lost_counters,
            'last_counter': last_counter,
            'gap': gap,
        }
        self.reception_data.append(row)
        self._append_to_csv(self.reception_file, row)

    def record_link_event(self, timestamp, action, mote_a, mote_b):
        row = {
            'timestamp_ms': timestamp,
            'action': action,
            'mote_a': mote_a,
            'mote_b': mote_b,
        }
        self.link_event_data.append(row)
        self._append_to_csv(self.link_file, row)

    def _append_to_csv(self, filename, row_dict):
        """
        Internal method: Append a single row to CSV file using DictWriter.

        Rows recorded before init_trace_files() stay in memory only.

        Args:
            filename: Path to CSV file
            row_dict: Dictionary of column_name → value
        """
        if filename is None:
            return
        try:
            headers = self._headers.get(str(filename))
            with open(filename, 'a', newline='') as f:
                dw = csv.DictWriter(f, fieldnames=headers)
                dw.writerow({k: row_dict.get(k, "") for k in headers})
        except Exception as e:
            print(f"Error writing to {filename}: {e}")

    def loss_statistics(self):
        """
        Compute loss statistics over the recorded reception rows.

        Returns:
            Dictionary with received count, total lost, loss rate, and the
            mean/max gap between consecutive counters
        """
        if not self.reception_data:
            return {'received': 0, 'lost': 0, 'loss_rate': 0.0,
                    'mean_gap': 0.0, 'max_gap': 0}

        gaps = np.array([r['gap'] for r in self.reception_data], dtype=np.int64)
        received = len(self.reception_data)
        lost = int(self.reception_data[-1]['lost_counters'])
        return {
            'received': received,
            'lost': lost,
            'loss_rate': float(lost / (received + lost)),
            'mean_gap': float(np.mean(gaps)),
            'max_gap': int(np.max(gaps)),
        }

    def generate_summary_report(self):
        """
        Generate run statistics and metadata.

        Writes run_summary_{run_id}.json next to the CSV traces when
        trace files were initialised.

        Returns:
            Dictionary containing summary statistics
        """
        self.wall_clock_seconds = time_module.time() - (self.start_time or time_module.time())
        summary = {
            'run_id': self.run_id,
            'verdict': self.verdict,
            'total_log_lines': len(self.log_data),
            'total_link_events': len(self.link_event_data),
            'sim_time_ms': self.sim_time_end_ms,
            'wall_clock_seconds': self.wall_clock_seconds,
            'reception': self.loss_statistics(),
        }

        if self.output_dir is not None:
            summary['trace_files'] = {
                'script_log': str(self.log_file),
                'reception': str(self.reception_file),
                'link_events': str(self.link_file),
            }
            summary_file = self.output_dir / f"run_summary_{self.run_id}.json"
            with open(summary_file, 'w') as f:
                json.dump(summary, f, indent=2)

        return summary
