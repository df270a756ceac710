"""Instance tag builder utility for AWS handlers."""
from typing import Dict, Iterable, List, Tuple


class InstanceTagBuilder:
    """Utility for building EC2 tag lists."""

    @staticmethod
    def build_tags(pairs: Iterable[Tuple[str, str]]) -> List[Dict[str, str]]:
        """Convert (key, value) pairs to AWS Key/Value dictionaries, keeping their order.

        Args:
            pairs: Tag pairs, already in the order they should be applied

        Returns:
            List of tag dictionaries with Key/Value pairs
        """
        return [{'Key': key, 'Value': value} for key, value in pairs]
