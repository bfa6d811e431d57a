"""Process-level wiring: the periodic publish loop"""
