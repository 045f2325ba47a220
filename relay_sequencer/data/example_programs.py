from relay_sequencer.domain.models import (
    DurationType,
    LoopStep,
    Program,
    RelayAction,
    RelayStep,
    WaitStep,
)

# ==============================================================================
# PROGRAM DEFINITIONS
# ==============================================================================

# --- FILL TANK: pump on for two minutes, then off ---
fill_tank = Program(
    id="fill_tank",
    name="Fill tank",
    steps=[
        RelayStep(id="fill_pump_on", relay=0, action=RelayAction.ON),
        WaitStep(id="fill_wait", duration=120),
        RelayStep(id="fill_pump_off", relay=0, action=RelayAction.OFF),
    ],
)

# --- PULSE IRRIGATION: open the garden valve in short bursts ---
pulse_irrigation = Program(
    id="pulse_irrigation",
    name="Pulse irrigation",
    steps=[
        RelayStep(id="pulse_pump_on", relay=0, action=RelayAction.ON),
        LoopStep(
            id="pulse_loop",
            iterations=5,
            body=[
                RelayStep(id="pulse_valve_open", relay=1, action=RelayAction.ON),
                WaitStep(id="pulse_water", duration=30),
                RelayStep(id="pulse_valve_close", relay=1, action=RelayAction.OFF),
                WaitStep(
                    id="pulse_soak",
                    duration_type=DurationType.RANDOM,
                    duration_min=60,
                    duration_max=90,
                ),
            ],
        ),
        RelayStep(id="pulse_pump_off", relay=0, action=RelayAction.OFF),
    ],
)

# --- ZONE ROTATION: each zone valve in turn, twice (disabled by default) ---
zone_rotation = Program(
    id="zone_rotation",
    name="Zone rotation",
    enabled=False,
    steps=[
        LoopStep(
            id="rotation_loop",
            iterations=2,
            body=[
                RelayStep(id="zone_a_open", relay=2, action=RelayAction.ON),
                WaitStep(id="zone_a_wait", duration=300),
                RelayStep(id="zone_a_close", relay=2, action=RelayAction.OFF),
                RelayStep(id="zone_b_open", relay=3, action=RelayAction.ON),
                WaitStep(id="zone_b_wait", duration=300),
                RelayStep(id="zone_b_close", relay=3, action=RelayAction.OFF),
            ],
        ),
    ],
)

EXAMPLE_PROGRAMS = {
    program.id: program for program in (fill_tank, pulse_irrigation, zone_rotation)
}
