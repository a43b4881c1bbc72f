"""Sample algorithms with known complexities, as source strings."""

FIBONACCI = """
def fibonacci(n):
    if n <= 1:
        return n
    return fibonacci(n - 1) + fibonacci(n - 2)
"""

FIBONACCI_WRAPPER = """
def f(n):
    if n <= 1:
        return n
    return fibonacci(n - 1) + fibonacci(n - 2)
"""

MEMO_FIBONACCI = """
from functools import lru_cache


@lru_cache(maxsize=None)
def fib(n):
    if n < 2:
        return n
    return fib(n - 1) + fib(n - 2)
"""

MERGE_SORT = """
def merge_sort(arr):
    if len(arr) <= 1:
        return arr
    mid = len(arr) // 2
    left = merge_sort(arr[:mid])
    right = merge_sort(arr[mid:])
    return merge(left, right)


def merge(left, right):
    result = []
    i = j = 0
    while i < len(left) and j < len(right):
        if left[i] <= right[j]:
            result.append(left[i])
            i += 1
        else:
            result.append(right[j])
            j += 1
    result.extend(left[i:])
    result.extend(right[j:])
    return result
"""

BINARY_SEARCH = """
def binary_search(arr, target):
    left, right = 0, len(arr) - 1
    while left <= right:
        mid = (left + right) // 2
        if arr[mid] == target:
            return mid
        elif arr[mid] < target:
            left = mid + 1
        else:
            right = mid - 1
    return -1
"""

MATRIX_MULTIPLY = """
def matrix_multiply(A, B, C, n):
    for i in range(n):
        for j in range(n):
            for k in range(n):
                C[i][j] += A[i][k] * B[k][j]
    return C
"""

SUM_LOOP = """
def total(arr):
    result = 0
    for x in arr:
        result += x
    return result
"""

CALLS_LINEAR_HELPER = """
def a(items):
    return b(items)


def b(items):
    count = 0
    for item in items:
        count += 1
    return count
"""

HIGH_CONFIDENCE_CALLER = """
def get_price(prices, key):
    value = prices[key] + 1
    return process(value)


def process(values):
    for v in values:
        print(v)
"""

PERMUTATIONS = """
def permutations(arr):
    if len(arr) <= 1:
        return [arr]
    result = []
    for i in range(len(arr)):
        rest = arr[:i] + arr[i + 1:]
        for perm in permutations(rest):
            result.append([arr[i]] + perm)
    return result
"""

N_QUEENS = """
def solve_n_queens(n):
    board = [-1] * n
    solutions = []

    def is_safe(row, col):
        for prev in range(row):
            if board[prev] == col or abs(board[prev] - col) == row - prev:
                return False
        return True

    def place(row):
        if row == n:
            solutions.append(board[:])
            return
        for col in range(n):
            if is_safe(row, col):
                board[row] = col
                place(row + 1)
                board[row] = -1

    place(0)
    return solutions
"""

TRAVELLING_SALESMAN = """
def tsp(distances):
    n = len(distances)
    best = float("inf")

    def visit(city, visited, cost):
        nonlocal best
        if len(visited) == n:
            best = min(best, cost + distances[city][0])
            return
        for nxt in range(n):
            if nxt not in visited:
                visited.append(nxt)
                visit(nxt, visited, cost + distances[city][nxt])
                visited.pop()

    visit(0, [0], 0)
    return best
"""

SUDOKU = """
def solve_sudoku(board):
    for row in range(9):
        for col in range(9):
            if board[row][col] == 0:
                for digit in range(1, 10):
                    if is_valid(board, row, col, digit):
                        board[row][col] = digit
                        if solve_sudoku(board):
                            return True
                        board[row][col] = 0
                return False
    return True
"""

TOWERS_OF_HANOI = """
def hanoi(n, source, target, spare, moves):
    if n == 0:
        return
    hanoi(n - 1, source, spare, target, moves)
    moves.append((source, target))
    hanoi(n - 1, spare, target, source, moves)
"""

SUBSETS_BITMASK = """
def all_subsets(items):
    n = len(items)
    result = []
    for mask in range(1 << n):
        subset = [items[i] for i in range(n) if mask & (1 << i)]
        result.append(subset)
    return result
"""

BUBBLE_SORT = """
def bubble_sort(arr):
    n = len(arr)
    for i in range(n):
        for j in range(0, n - i - 1):
            if arr[j] > arr[j + 1]:
                arr[j], arr[j + 1] = arr[j + 1], arr[j]
    return arr
"""

REMOVE_IN_LOOP = """
def remove_all(values, unwanted):
    for item in unwanted:
        if item in values:
            values.remove(item)
    return values
"""

COUNT_TRIPLETS = """
def count_triplets(arr, target):
    count = 0
    n = len(arr)
    for i in range(n):
        for j in range(i + 1, n):
            for k in range(j + 1, n):
                if arr[i] + arr[j] + arr[k] == target:
                    count += 1
    return count
"""

SORTED_CALL = """
def sort_scores(scores):
    ranked = sorted(scores)
    return ranked[0]
"""

HEAP_SORT = """
import heapq


def heap_sort(items):
    heap = []
    for item in items:
        heapq.heappush(heap, item)
    return [heapq.heappop(heap) for _ in range(len(heap))]
"""

BITS_PER_VALUE = """
def total_bits(values):
    bits = 0
    for value in values:
        while value > 0:
            value //= 2
            bits += 1
    return bits
"""

COUNT_DIGITS = """
def count_digits(n):
    digits = 0
    while n > 0:
        n //= 10
        digits += 1
    return digits
"""

BST_SEARCH = """
def bst_search(node, key):
    if node is None or node.key == key:
        return node
    if key < node.key:
        return bst_search(node.left, key)
    return bst_search(node.right, key)
"""

TREE_HEIGHT = """
def height(node):
    if node is None:
        return 0
    return 1 + max(height(node.left), height(node.right))
"""

GRAPH_DFS = """
def dfs(graph, node, visited):
    visited.add(node)
    for neighbor in graph[node]:
        if neighbor not in visited:
            dfs(graph, neighbor, visited)
"""

DICT_LOOKUP = """
def get_price(prices, item):
    if item in prices:
        return prices[item]
    return 0
"""

NO_SIGNAL = """
def configure(app):
    app.debug = False
    app.name = "demo"
    app.title = "Demo"
    app.version = "1"
    app.owner = "me"
    app.ready = True
"""

FIXED_INNER_LOOP = """
def window_total(values, width):
    total = 0
    for index in range(len(values)):
        for offset in (-1, 1):
            neighbor = index + offset
            if 0 <= neighbor < width:
                total += values[neighbor]
    return total
"""

MUTUAL_RECURSION = """
def walk_a(items, depth):
    if depth == 0:
        return 0
    return walk_b(items, depth - 1)


def walk_b(items, depth):
    total = 0
    for item in items:
        total += item
    return total + walk_a(items, depth)
"""

CALL_CHAIN = """
class Service:
    def load(self):
        return self.parse() + helper()

    def parse(self):
        return helper() + other.parse()


def helper():
    return 1
"""

PAIR_ALLOCATION = """
def pair_sums(values):
    best = 0
    for a in values:
        for b in values:
            pair = [a, b]
            best = max(best, sum(pair))
    return best
"""
