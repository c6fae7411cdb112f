"""
molcomsim: Molecular Communication Network Simulator

A discrete-time simulator of nanomachines that talk by releasing molecules
into a shared medium.

Core concepts:
- Transmitters release information molecules for the current message
- Molecules diffuse randomly or ride microtubules (active transport)
- A molecule is delivered when it overlaps a destination nanomachine
- Receivers answer with acknowledgement molecules
- Timeouts and retransmission credits make the channel reliable
"""

__version__ = "0.1.0"
