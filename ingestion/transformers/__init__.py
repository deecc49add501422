"""Document to row transformation"""
