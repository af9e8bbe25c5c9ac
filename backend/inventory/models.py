from django.db import models
from decimal import Decimal
from backend.core.models import User
from backend.parties.models import Supplier


class Fabric(models.Model):
    """Fabrics stocked by the meter"""
    CATEGORY_CHOICES = [
        ('COTTON', 'Cotton'),
        ('WOOL', 'Wool'),
        ('SILK', 'Silk'),
        ('LINEN', 'Linen'),
        ('SYNTHETIC', 'Synthetic'),
        ('BLEND', 'Blend'),
    ]

    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES)
    color = models.CharField(max_length=50, blank=True)
    pattern = models.CharField(max_length=50, blank=True)
    material = models.CharField(max_length=100, blank=True)
    price_per_meter = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    stock_quantity = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    low_stock_threshold = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('5.00'))
    min_order_quantity = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('1.00'))
    image_url = models.URLField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    @property
    def is_low_stock(self):
        return self.stock_quantity <= self.low_stock_threshold

    class Meta:
        db_table = 'fabrics'
        ordering = ['name']
        indexes = [
            models.Index(fields=['category'], name='fabrics_category_idx'),
            models.Index(fields=['is_active'], name='fabrics_active_idx'),
        ]


class InventoryItem(models.Model):
    """Materials, notions and accessories tracked by SKU"""
    CATEGORY_CHOICES = [
        ('SUIT_FABRICS', 'Suit Fabrics'),
        ('DRESS_MATERIALS', 'Dress Materials'),
        ('LININGS', 'Linings'),
        ('NOTIONS', 'Notions'),
        ('ACCESSORIES', 'Accessories'),
        ('THREADS', 'Threads'),
        ('BUTTONS', 'Buttons'),
        ('ZIPPERS', 'Zippers'),
        ('INTERFACINGS', 'Interfacings'),
        ('OTHER', 'Other'),
    ]

    sku = models.CharField(max_length=100, unique=True)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, default='OTHER')
    unit = models.CharField(max_length=20, default='pcs')
    unit_price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    currency = models.CharField(max_length=3, default='AED')
    current_stock = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0.000'))
    min_stock_level = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0.000'))
    supplier = models.ForeignKey(Supplier, on_delete=models.SET_NULL, null=True, blank=True, related_name='inventory_items')
    is_active = models.BooleanField(default=True)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='inventory_items_created')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.sku} - {self.name}"

    @property
    def is_low_stock(self):
        return self.current_stock <= self.min_stock_level

    class Meta:
        db_table = 'inventory_items'
        ordering = ['name']
        indexes = [
            models.Index(fields=['category'], name='inv_items_category_idx'),
            models.Index(fields=['is_active'], name='inv_items_active_idx'),
        ]


class InventoryTransaction(models.Model):
    """Stock movement ledger; one row per change to current_stock"""
    TYPE_CHOICES = [
        ('STOCK_IN', 'Stock In'),
        ('STOCK_OUT', 'Stock Out'),
        ('ADJUSTMENT', 'Adjustment'),
        ('RETURN', 'Return'),
        ('DAMAGE', 'Damage'),
        ('TRANSFER', 'Transfer'),
    ]

    inventory_item = models.ForeignKey(InventoryItem, on_delete=models.CASCADE, related_name='transactions')
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    quantity = models.DecimalField(max_digits=12, decimal_places=3)
    previous_stock = models.DecimalField(max_digits=12, decimal_places=3)
    new_stock = models.DecimalField(max_digits=12, decimal_places=3)
    reference_type = models.CharField(max_length=50, blank=True)
    reference_id = models.CharField(max_length=100, blank=True)
    notes = models.TextField(blank=True)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='inventory_transactions')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'inventory_transactions'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['inventory_item', '-created_at'], name='inv_tx_item_idx'),
            models.Index(fields=['type'], name='inv_tx_type_idx'),
        ]


class MaterialUsage(models.Model):
    """Material consumed by an order; total_cost is stored, checked at write time"""
    order = models.ForeignKey('orders.Order', on_delete=models.CASCADE, related_name='material_usages')
    inventory_item = models.ForeignKey(InventoryItem, on_delete=models.PROTECT, related_name='material_usages')
    quantity = models.DecimalField(max_digits=12, decimal_places=3)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    total_cost = models.DecimalField(max_digits=12, decimal_places=2)
    usage_date = models.DateField()
    notes = models.CharField(max_length=500, blank=True)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='material_usages')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'material_usages'
        ordering = ['-usage_date', '-created_at']
        indexes = [
            models.Index(fields=['order'], name='mat_usage_order_idx'),
            models.Index(fields=['usage_date'], name='mat_usage_date_idx'),
        ]


class Waste(models.Model):
    REASON_CHOICES = [
        ('CUTTING_LOSS', 'Cutting Loss'),
        ('STITCHING_ERROR', 'Stitching Error'),
        ('QUALITY_REJECT', 'Quality Reject'),
        ('EXCESS_MATERIAL', 'Excess Material'),
        ('DAMAGED_GOODS', 'Damaged Goods'),
        ('OTHER', 'Other'),
    ]

    inventory_item = models.ForeignKey(InventoryItem, on_delete=models.PROTECT, related_name='wastes')
    order = models.ForeignKey('orders.Order', on_delete=models.SET_NULL, null=True, blank=True, related_name='wastes')
    quantity = models.DecimalField(max_digits=12, decimal_places=3)
    unit_cost = models.DecimalField(max_digits=10, decimal_places=2)
    total_cost = models.DecimalField(max_digits=12, decimal_places=2)
    reason = models.CharField(max_length=20, choices=REASON_CHOICES)
    description = models.CharField(max_length=500, blank=True)
    waste_date = models.DateField()
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='wastes')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'wastes'
        ordering = ['-waste_date', '-created_at']
        indexes = [
            models.Index(fields=['reason'], name='waste_reason_idx'),
            models.Index(fields=['waste_date'], name='waste_date_idx'),
        ]
