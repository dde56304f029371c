"""MOTE-SCRIPT: event-driven test scripts for simulated mote networks."""
