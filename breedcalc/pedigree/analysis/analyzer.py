from collections import deque

# --- Ancestor closure (breadth-first) ---

def ancestors_of(individual):
    """
    Returns every individual reachable through dam/sire links, excluding the
    individual itself. An identifier is enqueued at most once, so reconverging
    lines are walked a single time and cyclic input still terminates.
    """
    ancestors = set()
    if individual is None:
        return ancestors

    seen = {individual.identifier}
    queue = deque()
    for parent in individual.parents():
        if parent.identifier not in seen:
            seen.add(parent.identifier)
            queue.append(parent)

    while queue:
        current = queue.popleft()
        ancestors.add(current)
        for parent in current.parents():
            if parent.identifier not in seen:
                seen.add(parent.identifier)
                queue.append(parent)

    return ancestors

# --- Path enumeration (depth-first) ---

def simple_paths(start, target):
    """Finds all paths from start up to target that never revisit a node."""
    if start is None or target is None:
        return []
    if start.identifier == target.identifier:
        return [(start,)]

    all_paths = []
    # Stack for DFS: stores tuples of (current_individual, path_to_current)
    stack = [(start, (start,))]

    while stack:
        current, path = stack.pop()
        on_path = {node.identifier for node in path}
        for parent in current.parents():
            if parent.identifier == target.identifier:
                all_paths.append(path + (parent,))
            elif parent.identifier not in on_path:
                stack.append((parent, path + (parent,)))

    return all_paths


def path_ids(path):
    return tuple(node.identifier for node in path)


def paths_are_independent(path1, path2):
    """
    True when two identifier paths to the same ancestor share no intermediate
    node. The start nodes and the ancestor itself are not intermediate.
    """
    middle1 = set(path1[1:-1])
    if not middle1:
        return True
    return middle1.isdisjoint(path2[1:-1])
