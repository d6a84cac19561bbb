# Simulation core: costs, planning, travel execution, encounter runtime
