"""
MOTE-SCRIPT Configuration Parameters

This module defines all run parameters for the MOTE-SCRIPT framework,
including script timeouts, mote roles, firmware timing, radio link quality,
and trace output settings.

Parameter categories:
- Reproducibility (RNG seed and run number)
- Test script deadlines and message keywords
- Mote roles in the reference topologies
- Client/server firmware timing
- Radio medium link quality
- Trace collection and output settings

Copyright (c) 2025 MOTE-SCRIPT Research Team
Licensed under the MIT License
"""

class Config:
    """Global configuration parameters for MOTE-SCRIPT runs"""

    SEED = 1337
    RUN = 0

    # ============================================================================
    # Test Script Deadlines (simulated milliseconds)
    # ============================================================================
    LINK_FAULT_TIMEOUT_MS = 7200000  # 2h
    RECEPTION_TIMEOUT_MS = 1000000

    # ============================================================================
    # Message Keywords
    # ============================================================================
    KW_DONE = "done"
    KW_DETERIORATE = "1 third"
    KW_IMPROVE = "2 thirds"
    KW_STARTED = "started"
    KW_RECEIVED = "received"

    # ============================================================================
    # Mote Roles
    # ============================================================================
    SERVER_ID = 1
    RELAY_ID = 2
    CLIENT_ID = 3

    # ============================================================================
    # Firmware Timing
    # ============================================================================
    BOOT_INTERVAL_MS = 1333
    CLIENT_START_DELAY_MS = 10 * 60 * 1000
    CLIENT_SEND_INTERVAL_MS = 10 * 1000
    CLIENT_SEND_JITTER_MS = 500
    CLIENT_COUNTER_LIMIT = 300
    RECEPTION_COUNTER_LIMIT = 10

    # ============================================================================
    # Radio Medium
    # ============================================================================
    NOMINAL_PRR = 1.0
    DETERIORATED_PRR = 0.0
    RELAY_PRR = 1.0

    # ============================================================================
    # Trace Collection Settings
    # ============================================================================
    TRACE_ENABLED = True
    TRACE_OUTPUT_DIR = "mote_script_traces"
