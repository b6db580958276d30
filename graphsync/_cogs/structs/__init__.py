"""
All the functions to reconcile the semi-structured values of the resources.

Grouped by the purpose of the manipulation: normalization for comparisons,
merging & updating for the locally stored state, diffing for the patches.

Used in the engines to decide what to send to the API on updates
(i.e. only the fields that have actually changed, plus a few reserved ones),
and what to keep as the authoritative local state after the writes.

All the functions are purely data-manipulative and computational.
No external calls or any i/o activities are done here.
"""
