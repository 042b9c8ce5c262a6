"""Repository layer: DynamoDB access helpers (boto3).

Keep functions thin and focused, so services/domains avoid raw request shapes.
"""
