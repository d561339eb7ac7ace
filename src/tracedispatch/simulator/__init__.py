"""
Simulated collaborators of the dispatcher -- event loop & timer, resource pools, job runners --
and `run.simulate` tying them together to replay a whole trace in-process.
"""
