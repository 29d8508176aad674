"""Reading order for OCR spans."""


from schemas import OcrTextSpan


def _bounds(span: OcrTextSpan) -> tuple[float, float, float, float]:
	xs = [point[0] for point in span.polygon or []]
	ys = [point[1] for point in span.polygon or []]
	return min(xs), min(ys), max(xs), max(ys)


def reading_order(spans: list[OcrTextSpan]) -> list[OcrTextSpan]:
	"""Order spans top-to-bottom, then left-to-right within a row.

	Spans share a row when their vertical centres are closer than half the
	median span height. If any span lacks a polygon the provider order is kept.
	"""
	if len(spans) < 2 or any(not span.polygon for span in spans):
		return list(spans)

	boxes = [(_bounds(span), span) for span in spans]
	heights = sorted(bottom - top for (_, top, _, bottom), _ in boxes)
	tolerance = max(heights[len(heights) // 2] / 2.0, 1.0)

	rows: list[list[tuple[tuple[float, float, float, float], OcrTextSpan]]] = []
	for box in sorted(boxes, key=lambda item: (item[0][1] + item[0][3]) / 2.0):
		centre = (box[0][1] + box[0][3]) / 2.0
		if rows:
			last = rows[-1][-1][0]
			if abs(centre - (last[1] + last[3]) / 2.0) < tolerance:
				rows[-1].append(box)
				continue
		rows.append([box])

	ordered: list[OcrTextSpan] = []
	for row in rows:
		ordered.extend(span for _, span in sorted(row, key=lambda item: item[0][0]))
	for index, span in enumerate(ordered):
		ordered[index] = span.model_copy(update={"line_index": index})
	return ordered
