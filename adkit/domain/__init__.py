"""Campaign, line item and targeting models."""