"""
Interior cost estimator.

Room-wise pricing: the floor area is split across rooms in proportion to
their counts, each share priced at the material-level base rate times a
room-type multiplier. GST is added on top and the total is split into a
fixed 40/40/20 payment schedule.

Input: ProjectDetails (dict or pydantic model)
Output: CostBreakdown dict, stored verbatim on the estimate

No rounding happens here. Display rounding is the caller's job.
"""

import math

from .base import BaseCalculator, CalculatorInputError

# Base rate per sq ft by material level
BASE_RATES = {
    "Basic": 1200,
    "Standard": 1800,
    "Premium": 2500,
    "Luxury": 3500,
}

ROOM_MULTIPLIERS = {
    "Living Room": 1.2,
    "Bedroom": 1.0,
    "Kitchen": 1.5,
    "Bathroom": 1.3,
    "Dining Room": 1.1,
    "Study": 1.0,
    "Balcony": 0.8,
    "Other": 1.0,
}

GST_RATE = 18  # percent

# (name, percentage): always three entries, always in this order
MILESTONE_SPLIT = [
    ("Initial Payment", 40),
    ("Mid-Project Payment", 40),
    ("Final Payment", 20),
]


class CostEstimator(BaseCalculator):

    def calculate(self, project_details) -> dict:
        """Full CostBreakdown for a ProjectDetails snapshot."""
        lines = self.room_lines(project_details)
        base_cost = sum(line["cost"] for line in lines)

        gst_amount = base_cost * (GST_RATE / 100.0)
        total = base_cost + gst_amount
        if not math.isfinite(total):
            raise CalculatorInputError(
                f"Estimate total is not a finite amount (sqft={self.get_field(project_details, 'sqft')!r})"
            )

        return {
            "base_cost": base_cost,
            "gst": {
                "rate": GST_RATE,
                "amount": gst_amount,
            },
            "total": total,
            "milestones": self.build_milestones(total),
        }

    def room_lines(self, project_details) -> list:
        """
        Per-room area and cost. Costs sum to base_cost.

        Raises CalculatorInputError for an unknown material level or room
        type, or when the rooms add up to zero.
        """
        sqft = self.get_field(project_details, "sqft")
        if sqft is None:
            raise CalculatorInputError("sqft is required")
        sqft = float(sqft)

        base_rate = self.lookup_rate(
            BASE_RATES, self.get_field(project_details, "material_level"), "material level",
        )

        rooms = self.get_field(project_details, "rooms") or []
        total_room_count = sum(self.get_field(room, "count", 0) for room in rooms)
        if total_room_count <= 0:
            raise CalculatorInputError(
                "rooms must contain at least one room with a positive count"
            )

        lines = []
        for room in rooms:
            room_type = self.enum_value(self.get_field(room, "type"))
            count = self.get_field(room, "count", 0)
            multiplier = self.lookup_rate(ROOM_MULTIPLIERS, room_type, "room type")

            room_area = sqft * (count / total_room_count)
            lines.append({
                "type": room_type,
                "count": count,
                "area_sqft": room_area,
                "rate": base_rate,
                "multiplier": multiplier,
                "cost": room_area * base_rate * multiplier,
            })
        return lines

    def build_milestones(self, total: float) -> list:
        """Fixed 40/40/20 schedule. due_date is left for the studio to set."""
        return [
            {
                "name": name,
                "percentage": pct,
                "amount": total * (pct / 100.0),
                "due_date": None,
            }
            for name, pct in MILESTONE_SPLIT
        ]


_estimator = CostEstimator()


def compute_cost_breakdown(project_details) -> dict:
    """Module-level entry point used by the estimate handlers."""
    return _estimator.calculate(project_details)


def room_breakdown(project_details) -> list:
    return _estimator.room_lines(project_details)
