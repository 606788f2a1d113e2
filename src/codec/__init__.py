"""
Codec modules for the review store.

- Wire: primitive field encoding (bool, u8, u32, string)
- Record codec: ReviewRecord <-> fixed-capacity segment buffer
- Instruction: tagged AddReview / UpdateReview instruction data
"""
