"""
Sales app for POS order submission.

Builds carts, submits them through the order workflow and prints receipts.
"""
