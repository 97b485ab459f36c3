"""
The MODEL layer contains the element data structures and the tessellation
numerics. It has NO knowledge of the markup being read or of the read pass.
"""
